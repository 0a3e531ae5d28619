"""SQLAlchemy table definitions owned by Auto-Review Policy Service."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    func,
)

from packages.logbook_shared.ids import ulid_primary_key_column

metadata = MetaData()

auto_review_settings = Table(
    "auto_review_settings",
    metadata,
    ulid_primary_key_column("id", table_name="auto_review_settings"),
    Column("category", String(64), nullable=False),
    Column("enabled", Boolean, nullable=False, server_default="false"),
    Column("updated_by", String(128), nullable=False),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    UniqueConstraint("category", name="uq_auto_review_settings_category"),
)
