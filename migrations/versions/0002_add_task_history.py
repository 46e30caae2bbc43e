"""add task history table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_add_task_history"
down_revision = "0001_create_tasks"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "task_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("task_id", sa.String(length=36), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_task_history_user_id", "task_history", ["user_id"], unique=False)
    op.create_index(
        "ix_task_history_completed_at", "task_history", ["completed_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_task_history_completed_at", table_name="task_history")
    op.drop_index("ix_task_history_user_id", table_name="task_history")
    op.drop_table("task_history")
