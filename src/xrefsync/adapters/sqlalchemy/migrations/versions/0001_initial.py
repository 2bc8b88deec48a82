"""Create registry, association and load bookkeeping tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _created_columns() -> list[sa.Column[object]]:
    return [
        sa.Column("created_by", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "entity_type",
        sa.Column("key", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("key", name="pk_entity_type"),
        sa.UniqueConstraint("name", name="uq_entity_type_name"),
    )
    op.create_table(
        "namespace",
        sa.Column("key", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("key", name="pk_namespace"),
        sa.UniqueConstraint("name", name="uq_namespace_name"),
    )
    op.create_table(
        "association",
        sa.Column("key", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("identifier", sa.String(), nullable=False),
        sa.Column("prefix_part", sa.String(), nullable=True),
        sa.Column("numeric_part", sa.Integer(), nullable=True),
        sa.Column("namespace_key", sa.Integer(), nullable=False),
        sa.Column("entity_type_key", sa.Integer(), nullable=False),
        sa.Column("entity_key", sa.Integer(), nullable=False),
        sa.Column("private", sa.Boolean(), nullable=False),
        sa.Column("preferred", sa.Boolean(), nullable=False),
        *_created_columns(),
        sa.ForeignKeyConstraint(
            ["namespace_key"],
            ["namespace.key"],
            name="fk_association_namespace_key_namespace",
        ),
        sa.ForeignKeyConstraint(
            ["entity_type_key"],
            ["entity_type.key"],
            name="fk_association_entity_type_key_entity_type",
        ),
        sa.PrimaryKeyConstraint("key", name="pk_association"),
    )
    op.create_index(
        "ix_association_identifier_namespace",
        "association",
        ["identifier", "namespace_key"],
    )
    op.create_index("ix_association_created_by", "association", ["created_by"])
    op.create_table(
        "association_reference",
        sa.Column("association_key", sa.Integer(), nullable=False),
        sa.Column("reference_key", sa.Integer(), nullable=False),
        *_created_columns(),
        sa.ForeignKeyConstraint(
            ["association_key"],
            ["association.key"],
            name="fk_association_reference_association_key_association",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "association_key", "reference_key", name="pk_association_reference"
        ),
    )
    op.create_table(
        "auxiliary_link",
        sa.Column("subject_key", sa.Integer(), nullable=False),
        sa.Column("reference_key", sa.Integer(), nullable=False),
        *_created_columns(),
        sa.PrimaryKeyConstraint("subject_key", "reference_key", name="pk_auxiliary_link"),
    )
    op.create_table(
        "association_staging",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("job_stream", sa.String(), nullable=False),
        sa.Column("record_key", sa.Integer(), nullable=False),
        sa.Column("identifier", sa.String(), nullable=False),
        sa.Column("namespace_name", sa.String(), nullable=False),
        sa.Column("is_subject", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_association_staging"),
    )
    op.create_index(
        "ix_association_staging_job_stream_record",
        "association_staging",
        ["job_stream", "record_key"],
    )
    op.create_table(
        "discrepancy_report",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("subject_identifier", sa.String(), nullable=False),
        sa.Column("subject_namespace_key", sa.Integer(), nullable=False),
        sa.Column("subject_entity_key", sa.Integer(), nullable=True),
        sa.Column("subject_entity_type", sa.Integer(), nullable=True),
        sa.Column("candidate_identifier", sa.String(), nullable=True),
        sa.Column("candidate_namespace_key", sa.Integer(), nullable=True),
        sa.Column("candidate_entity_key", sa.Integer(), nullable=True),
        sa.Column("candidate_entity_type", sa.Integer(), nullable=True),
        sa.Column("expected_type", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=1), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        *_created_columns(),
        sa.PrimaryKeyConstraint("id", name="pk_discrepancy_report"),
    )


def downgrade() -> None:
    op.drop_table("discrepancy_report")
    op.drop_index("ix_association_staging_job_stream_record", table_name="association_staging")
    op.drop_table("association_staging")
    op.drop_table("auxiliary_link")
    op.drop_table("association_reference")
    op.drop_index("ix_association_created_by", table_name="association")
    op.drop_index("ix_association_identifier_namespace", table_name="association")
    op.drop_table("association")
    op.drop_table("namespace")
    op.drop_table("entity_type")
