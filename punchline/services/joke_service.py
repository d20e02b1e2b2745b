"""Joke Service — generate a joke for a user, then try to keep it.

Invariants:
    - Storage failure NEVER turns a successful generation into an error
    - saved=False outcomes carry the in-memory result and a warning
    - Generation failures (validation, exhaustion) propagate unchanged
"""

import logging
from dataclasses import dataclass

from punchline.core.domain_types import UserId
from punchline.core.errors import DatabaseError
from punchline.core.generation_types import GenerationRequest, GenerationResult
from punchline.core.repository_protocols import JokeRepository, StoredJokeLike
from punchline.services.joke_generator import JokeGenerator

logger = logging.getLogger(__name__)

NOT_SAVED_WARNING = "Joke generated but not saved to history"


@dataclass(frozen=True)
class JokeOutcome:
    """What the API returns for one generation."""
    request: GenerationRequest
    result: GenerationResult
    stored: StoredJokeLike | None = None
    warning: str | None = None

    @property
    def saved(self) -> bool:
        return self.stored is not None


class JokeService:
    """Generate-then-persist use case."""

    def __init__(self, generator: JokeGenerator, repository: JokeRepository):
        self._generator = generator
        self._repository = repository

    async def generate_for_user(
        self, user_id: UserId, request: GenerationRequest,
    ) -> JokeOutcome:
        result = await self._generator.generate(request)
        record = {
            "content": result.text,
            "topic": request.topic,
            "joke_type": request.style.value,
            "category": request.category,
            "model_used": result.model_used,
            "tokens_used": result.tokens_used,
            "cost_usd": result.cost_usd,
        }
        try:
            stored = await self._repository.save(record, user_id)
        except DatabaseError as e:
            logger.error(
                f"Error saving joke: {e.message}",
                extra={"user_id": str(user_id), "error_code": e.code},
            )
            return JokeOutcome(request, result, warning=NOT_SAVED_WARNING)
        return JokeOutcome(request, result, stored=stored)
