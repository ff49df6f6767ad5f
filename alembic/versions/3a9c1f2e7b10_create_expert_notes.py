"""create expert_notes table

Revision ID: 3a9c1f2e7b10
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "3a9c1f2e7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "expert_notes",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("symbol", sa.String(length=64), nullable=False),
        sa.Column("market", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("person", sa.String(length=200), nullable=False),
        sa.Column("opinion", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_expert_notes_symbol_market", "expert_notes", ["symbol", "market"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_expert_notes_symbol_market", table_name="expert_notes")
    op.drop_table("expert_notes")
