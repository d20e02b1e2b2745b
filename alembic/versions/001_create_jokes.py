"""Create jokes table.

Revision ID: 001_create_jokes
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_create_jokes"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "jokes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("topic", sa.String(200), nullable=False),
        sa.Column("joke_type", sa.String(20), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("model_used", sa.String(200), nullable=False),
        sa.Column("tokens_used", sa.Integer, nullable=False, server_default="0"),
        sa.Column("cost_usd", sa.Float, nullable=False, server_default="0"),
        sa.Column("user_rating", sa.Integer, nullable=True),
        sa.Column("favorited", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("shared", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "user_rating IS NULL OR (user_rating BETWEEN 1 AND 5)",
            name="ck_jokes_user_rating_range",
        ),
    )
    op.create_index("ix_jokes_user_id", "jokes", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_jokes_user_id", table_name="jokes")
    op.drop_table("jokes")
