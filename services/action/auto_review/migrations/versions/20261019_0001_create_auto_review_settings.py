"""create auto review settings table"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from packages.logbook_shared.ids.constants import ULID_DOMAIN_NAME
from services.action.auto_review.data.runtime import auto_review_postgres_schema

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _ulid_domain(schema: str) -> postgresql.DOMAIN:
    return postgresql.DOMAIN(
        name=ULID_DOMAIN_NAME,
        data_type=postgresql.BYTEA(),
        schema=schema,
        create_type=False,
    )


def upgrade() -> None:
    schema = auto_review_postgres_schema()
    op.create_table(
        "auto_review_settings",
        sa.Column("id", _ulid_domain(schema), primary_key=True, nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column(
            "enabled", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("updated_by", sa.String(length=128), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("category", name="uq_auto_review_settings_category"),
        schema=schema,
    )


def downgrade() -> None:
    op.drop_table("auto_review_settings", schema=auto_review_postgres_schema())
