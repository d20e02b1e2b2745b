"""API Dependencies — wiring between FastAPI and the service layer.

Invariants:
    - Generator and auth verifier are built once in the lifespan and read from app.state
    - get_current_user runs before any handler that touches jokes
    - Repository is per-request (bound to the request's AsyncSession)
"""

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from punchline.core.domain_types import UserId
from punchline.core.errors import UnauthenticatedError
from punchline.core.repository_protocols import AuthVerifier, JokeRepository
from punchline.infrastructure.database import get_db
from punchline.infrastructure.joke_repository import SqlJokeRepository
from punchline.services.joke_generator import JokeGenerator
from punchline.services.joke_service import JokeService

_BEARER_PREFIX = "Bearer "


def get_joke_generator(request: Request) -> JokeGenerator:
    return request.app.state.joke_generator


def get_auth_verifier(request: Request) -> AuthVerifier:
    return request.app.state.auth_verifier


async def get_current_user(
    authorization: str | None = Header(None),
    verifier: AuthVerifier = Depends(get_auth_verifier),
) -> UserId:
    """Resolve the Authorization header to a user id or raise 401."""
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        raise UnauthenticatedError()
    return await verifier.verify(authorization[len(_BEARER_PREFIX):])


def get_joke_repository(db: AsyncSession = Depends(get_db)) -> JokeRepository:
    return SqlJokeRepository(db)


def get_joke_service(
    generator: JokeGenerator = Depends(get_joke_generator),
    repository: JokeRepository = Depends(get_joke_repository),
) -> JokeService:
    return JokeService(generator, repository)
