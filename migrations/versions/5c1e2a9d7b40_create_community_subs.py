"""create community_subs

Revision ID: 5c1e2a9d7b40
Revises:
Create Date: 2026-10-16 09:12:44.318204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2a9d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the submissions table and its lookup indexes."""
    op.create_table(
        "community_subs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("community_name", sa.Text(), nullable=False),
        sa.Column("platform", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("short_description", sa.Text(), nullable=False),
        sa.Column("long_description", sa.Text(), nullable=False),
        sa.Column("join_link", sa.Text(), nullable=True),
        sa.Column("join_type", sa.Text(), nullable=False),
        sa.Column("price_inr", sa.Integer(), nullable=True),
        sa.Column("owner_id", sa.Text(), nullable=True),
        sa.Column("founder_name", sa.Text(), nullable=False),
        sa.Column("founder_bio", sa.Text(), nullable=False),
        sa.Column("show_founder_info", sa.Boolean(), nullable=False),
        sa.Column("logo_url", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("review_notes", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_community_subs_owner_id", "community_subs", ["owner_id"])
    op.create_index(
        "ix_community_subs_status_created", "community_subs", ["status", "created_at"]
    )


def downgrade() -> None:
    """Drop the submissions table."""
    op.drop_index("ix_community_subs_status_created", table_name="community_subs")
    op.drop_index("ix_community_subs_owner_id", table_name="community_subs")
    op.drop_table("community_subs")
