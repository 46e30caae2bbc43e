"""add user settings and streaks"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0003_add_user_settings_and_streaks"
down_revision = "0002_add_task_history"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user_settings",
        sa.Column("user_id", sa.String(length=64), primary_key=True),
        sa.Column("streak_duration", sa.String(length=20), nullable=False, server_default="monthly"),
        sa.Column("timezone", sa.String(length=8), nullable=False, server_default="IST"),
        sa.Column("theme", sa.String(length=10), nullable=False, server_default="dark"),
        sa.Column("show_history", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("max_history_items", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "user_streaks",
        sa.Column("user_id", sa.String(length=64), primary_key=True),
        sa.Column("daily_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("weekly_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("monthly_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("user_streaks")
    op.drop_table("user_settings")
