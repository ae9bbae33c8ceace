"""Initial schema: sigils, sigil_alignments, journal_entries, user_progress.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sigils",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("parameters", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_sigils_user_id", "sigils", ["user_id"])

    op.create_table(
        "sigil_alignments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column(
            "sigil_id", sa.String(36),
            sa.ForeignKey("sigils.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("timeline_node_id", sa.String(50), nullable=False),
        sa.Column("alignment_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "sigil_id", name="uq_alignment_user_sigil"),
    )

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("entry_type", sa.String(30), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("content", sa.Text, nullable=False, server_default=""),
        sa.Column("chakra", sa.String(20), nullable=True),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("xp_awarded", sa.Integer, nullable=False, server_default="0"),
        sa.Column("frequency", sa.Float, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_journal_entries_user_id", "journal_entries", ["user_id"])

    op.create_table(
        "user_progress",
        sa.Column("user_id", sa.String(64), primary_key=True),
        sa.Column("light_points", sa.Integer, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("user_progress")
    op.drop_index("ix_journal_entries_user_id", table_name="journal_entries")
    op.drop_table("journal_entries")
    op.drop_table("sigil_alignments")
    op.drop_index("ix_sigils_user_id", table_name="sigils")
    op.drop_table("sigils")
