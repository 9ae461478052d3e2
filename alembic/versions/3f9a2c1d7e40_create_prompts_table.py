"""create prompts table

Revision ID: 3f9a2c1d7e40
Revises:
Create Date: 2025-07-02 10:15:00.000000

Tags are stored as a JSON-encoded text array; votes may go negative.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "3f9a2c1d7e40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLE = "prompts"


def upgrade() -> None:
    op.create_table(
        TABLE,
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False, server_default="text"),
        sa.Column("tags", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("votes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("author", sa.Text(), nullable=False, server_default="Anonymous"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_prompts_created_at", TABLE, ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_prompts_created_at", table_name=TABLE)
    op.drop_table(TABLE)
