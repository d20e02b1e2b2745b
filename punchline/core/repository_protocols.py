"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Provider, identity, and storage accessed only through these Protocols
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no base class
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from punchline.core.domain_types import JokeId, UserId
from punchline.core.generation_types import ProviderCompletion


class StoredJokeLike(Protocol):
    """Structural contract for persisted jokes handed back to the API layer."""
    id: UUID
    user_id: UUID
    content: str
    topic: str
    joke_type: str
    category: str | None
    model_used: str
    tokens_used: int
    cost_usd: float
    user_rating: int | None
    favorited: bool
    shared: bool
    created_at: datetime


class ProviderClient(Protocol):
    """One chat completion per call. Raises ProviderCallError on any failure."""
    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> ProviderCompletion: ...


class AuthVerifier(Protocol):
    """Bearer token -> UserId. Raises UnauthenticatedError."""
    async def verify(self, token: str) -> UserId: ...


class JokeRepository(Protocol):
    """Contract for joke persistence. Raises DatabaseError on storage failure."""
    async def save(self, record: dict, user_id: UserId) -> StoredJokeLike: ...
    async def list_for_user(
        self, user_id: UserId, limit: int, offset: int,
        favorited: bool | None = None,
    ) -> list[StoredJokeLike]: ...
    async def get_for_user(
        self, joke_id: JokeId, user_id: UserId,
    ) -> StoredJokeLike | None: ...
    async def update_for_user(
        self, joke_id: JokeId, user_id: UserId, fields: dict,
    ) -> StoredJokeLike | None: ...
    async def delete_for_user(self, joke_id: JokeId, user_id: UserId) -> bool: ...
