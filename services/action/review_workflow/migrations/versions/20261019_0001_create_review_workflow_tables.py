"""create entries, signatures and assignment tables"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from packages.logbook_shared.ids.constants import ULID_DOMAIN_NAME
from services.action.review_workflow.data.runtime import (
    review_workflow_postgres_schema,
)

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
    schema = review_workflow_postgres_schema()
    op.create_table(
        "entries",
        sa.Column("id", _ulid_domain(schema), primary_key=True, nullable=False),
        sa.Column("owner_id", sa.String(length=128), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("sequence_no", sa.Integer(), nullable=False),
        sa.Column(
            "status", sa.String(length=32), nullable=False, server_default="DRAFT"
        ),
        sa.Column("reviewer_remark", sa.Text(), nullable=True),
        sa.Column(
            "payload",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "owner_id",
            "category",
            "sequence_no",
            name="uq_entries_owner_category_seq",
        ),
        sa.CheckConstraint(
            "status IN ('DRAFT', 'SUBMITTED', 'NEEDS_REVISION', 'SIGNED')",
            name="ck_entries_status",
        ),
        sa.CheckConstraint("sequence_no > 0", name="ck_entries_sequence_positive"),
        schema=schema,
    )
    op.create_index(
        "ix_entries_status_category",
        "entries",
        ["status", "category"],
        schema=schema,
    )

    op.create_table(
        "digital_signatures",
        sa.Column("id", _ulid_domain(schema), primary_key=True, nullable=False),
        sa.Column("signer_id", sa.String(length=128), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", postgresql.BYTEA(), nullable=False),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.ForeignKeyConstraint(
            ["entity_id"],
            [f"{schema}.entries.id"],
            name="fk_digital_signatures_entity_id",
            ondelete="RESTRICT",
        ),
        schema=schema,
    )
    op.create_index(
        "ix_digital_signatures_entity_id",
        "digital_signatures",
        ["entity_id"],
        schema=schema,
    )

    op.create_table(
        "faculty_batch_assignments",
        sa.Column("faculty_id", sa.String(length=128), nullable=False),
        sa.Column("batch_id", sa.String(length=128), nullable=False),
        sa.PrimaryKeyConstraint(
            "faculty_id", "batch_id", name="pk_faculty_batch_assignments"
        ),
        schema=schema,
    )
    op.create_table(
        "batch_memberships",
        sa.Column("student_id", sa.String(length=128), primary_key=True),
        sa.Column("batch_id", sa.String(length=128), nullable=False),
        schema=schema,
    )
    op.create_index(
        "ix_batch_memberships_batch_id",
        "batch_memberships",
        ["batch_id"],
        schema=schema,
    )
    op.create_table(
        "faculty_student_assignments",
        sa.Column("faculty_id", sa.String(length=128), nullable=False),
        sa.Column("student_id", sa.String(length=128), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint(
            "faculty_id", "student_id", name="pk_faculty_student_assignments"
        ),
        schema=schema,
    )


def downgrade() -> None:
    schema = review_workflow_postgres_schema()
    op.drop_table("faculty_student_assignments", schema=schema)
    op.drop_index(
        "ix_batch_memberships_batch_id", table_name="batch_memberships", schema=schema
    )
    op.drop_table("batch_memberships", schema=schema)
    op.drop_table("faculty_batch_assignments", schema=schema)
    op.drop_index(
        "ix_digital_signatures_entity_id",
        table_name="digital_signatures",
        schema=schema,
    )
    op.drop_table("digital_signatures", schema=schema)
    op.drop_index("ix_entries_status_category", table_name="entries", schema=schema)
    op.drop_table("entries", schema=schema)
