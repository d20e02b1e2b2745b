"""Joke ORM — a generated joke with its usage metadata and owner feedback.

Invariants:
    - user_id is the Supabase user id of the owner (no FK: users live in Supabase)
    - content is non-nullable text
    - user_rating is NULL until the owner rates the joke (1-5)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Float, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from punchline.db.base import Base


class Joke(Base):
    """Generated joke owned by one user."""
    __tablename__ = "jokes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    topic: Mapped[str] = mapped_column(String(200), nullable=False)
    joke_type: Mapped[str] = mapped_column(String(20), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model_used: Mapped[str] = mapped_column(String(200), nullable=False)
    tokens_used: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    cost_usd: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0,
    )
    user_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    favorited: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    shared: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
