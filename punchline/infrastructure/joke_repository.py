"""Joke Repository — SQLAlchemy persistence for generated jokes.

Invariants:
    - Every query is scoped by user_id: a user never sees another user's jokes
    - Any SQLAlchemyError rolls back and surfaces as DatabaseError
    - List order is newest first
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from punchline.core.domain_types import JokeId, UserId
from punchline.core.errors import DatabaseError
from punchline.models.joke import Joke

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"user_rating", "favorited", "shared"})


class SqlJokeRepository:
    """JokeRepository backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def save(self, record: dict, user_id: UserId) -> Joke:
        joke = Joke(user_id=user_id, **record)
        self._db.add(joke)
        try:
            await self._db.commit()
            await self._db.refresh(joke)
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(f"Joke insert failed: {e}", extra={"user_id": str(user_id)})
            raise DatabaseError("Could not store joke", "insert")
        return joke

    async def list_for_user(
        self, user_id: UserId, limit: int, offset: int,
        favorited: bool | None = None,
    ) -> list[Joke]:
        query = (
            select(Joke)
            .where(Joke.user_id == user_id)
            .order_by(Joke.created_at.desc())
        )
        if favorited is not None:
            query = query.where(Joke.favorited == favorited)
        query = query.limit(limit).offset(offset)
        result = await self._db.execute(query)
        return list(result.scalars().all())

    async def get_for_user(self, joke_id: JokeId, user_id: UserId) -> Joke | None:
        result = await self._db.execute(
            select(Joke).where(Joke.id == joke_id, Joke.user_id == user_id),
        )
        return result.scalar_one_or_none()

    async def update_for_user(
        self, joke_id: JokeId, user_id: UserId, fields: dict,
    ) -> Joke | None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {', '.join(sorted(unknown))}")
        joke = await self.get_for_user(joke_id, user_id)
        if joke is None:
            return None
        for name, value in fields.items():
            setattr(joke, name, value)
        try:
            await self._db.commit()
            await self._db.refresh(joke)
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(f"Joke update failed: {e}", extra={"joke_id": str(joke_id)})
            raise DatabaseError("Could not update joke", "update")
        return joke

    async def delete_for_user(self, joke_id: JokeId, user_id: UserId) -> bool:
        joke = await self.get_for_user(joke_id, user_id)
        if joke is None:
            return False
        try:
            await self._db.delete(joke)
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(f"Joke delete failed: {e}", extra={"joke_id": str(joke_id)})
            raise DatabaseError("Could not delete joke", "delete")
        return True
