"""add_flow_and_flow_snapshot_tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-16 09:12:44.118302

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "flow",
        sa.Column("identifier", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("bucket_identifier", sa.String(length=255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("identifier"),
    )
    op.create_index(op.f("ix_flow_name"), "flow", ["name"], unique=False)
    op.create_index(
        op.f("ix_flow_bucket_identifier"), "flow", ["bucket_identifier"], unique=False
    )

    op.create_table(
        "flow_snapshot",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("flow_identifier", sa.String(length=255), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=True),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column(
            "flow_contents", postgresql.JSONB(astext_type=sa.Text()), nullable=False
        ),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("version >= 1", name="ck_flow_snapshot_version_positive"),
        sa.ForeignKeyConstraint(
            ["flow_identifier"], ["flow.identifier"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "flow_identifier", "version", name="uq_flow_snapshot_flow_version"
        ),
    )
    op.create_index(
        "ix_flow_snapshot_flow_identifier",
        "flow_snapshot",
        ["flow_identifier"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_flow_snapshot_flow_identifier", table_name="flow_snapshot")
    op.drop_table("flow_snapshot")
    op.drop_index(op.f("ix_flow_bucket_identifier"), table_name="flow")
    op.drop_index(op.f("ix_flow_name"), table_name="flow")
    op.drop_table("flow")
