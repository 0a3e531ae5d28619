"""SQLAlchemy table definitions owned by Review Workflow Service."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import BYTEA, JSONB

from packages.logbook_shared.ids import ulid_primary_key_column

metadata = MetaData()

ENTRY_STATUSES = ("DRAFT", "SUBMITTED", "NEEDS_REVISION", "SIGNED")

entries = Table(
    "entries",
    metadata,
    ulid_primary_key_column("id", table_name="entries"),
    Column("owner_id", String(128), nullable=False),
    Column("category", String(64), nullable=False),
    Column("sequence_no", Integer, nullable=False),
    Column("status", String(32), nullable=False, server_default="DRAFT"),
    Column("reviewer_remark", Text, nullable=True),
    Column("payload", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    UniqueConstraint(
        "owner_id", "category", "sequence_no", name="uq_entries_owner_category_seq"
    ),
    CheckConstraint(
        "status IN ('DRAFT', 'SUBMITTED', 'NEEDS_REVISION', 'SIGNED')",
        name="ck_entries_status",
    ),
    CheckConstraint("sequence_no > 0", name="ck_entries_sequence_positive"),
    Index("ix_entries_status_category", "status", "category"),
)

digital_signatures = Table(
    "digital_signatures",
    metadata,
    ulid_primary_key_column("id", table_name="digital_signatures"),
    Column("signer_id", String(128), nullable=False),
    Column("entity_type", String(64), nullable=False),
    Column(
        "entity_id",
        BYTEA,
        ForeignKey("entries.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("remark", Text, nullable=True),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    Index("ix_digital_signatures_entity_id", "entity_id"),
)

faculty_batch_assignments = Table(
    "faculty_batch_assignments",
    metadata,
    Column("faculty_id", String(128), nullable=False),
    Column("batch_id", String(128), nullable=False),
    PrimaryKeyConstraint("faculty_id", "batch_id", name="pk_faculty_batch_assignments"),
)

batch_memberships = Table(
    "batch_memberships",
    metadata,
    Column("student_id", String(128), primary_key=True),
    Column("batch_id", String(128), nullable=False),
    Index("ix_batch_memberships_batch_id", "batch_id"),
)

faculty_student_assignments = Table(
    "faculty_student_assignments",
    metadata,
    Column("faculty_id", String(128), nullable=False),
    Column("student_id", String(128), nullable=False),
    Column("semester", Integer, nullable=True),
    PrimaryKeyConstraint(
        "faculty_id", "student_id", name="pk_faculty_student_assignments"
    ),
)
