"""Jokes — generate a joke, then browse and rate the caller's history.

Invariants:
    - Every endpoint requires a verified bearer token (get_current_user)
    - Generation succeeds with saved=false when storage fails
    - Jokes of other users are indistinguishable from missing jokes (404)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from punchline.api.dependencies import (
    get_current_user, get_joke_repository, get_joke_service,
)
from punchline.core.domain_types import JokeId, UserId
from punchline.core.errors import ResourceNotFoundError
from punchline.core.generation_types import GenerationRequest
from punchline.core.repository_protocols import JokeRepository
from punchline.schemas.joke import (
    JokeGenerateRequest, JokeGenerateResponse, JokeListResponse,
    JokeResponse, JokeUpdate,
)
from punchline.services.joke_service import JokeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/jokes", tags=["jokes"])


@router.post("/generate", response_model=JokeGenerateResponse)
async def generate_joke(
    body: JokeGenerateRequest,
    user_id: UserId = Depends(get_current_user),
    service: JokeService = Depends(get_joke_service),
):
    """Generate a joke and store it in the caller's history."""
    request = GenerationRequest.create(body.topic, body.style, body.category)
    outcome = await service.generate_for_user(user_id, request)
    return JokeGenerateResponse(
        text=outcome.result.text,
        model=outcome.result.model_used,
        tokens_used=outcome.result.tokens_used,
        cost_usd=outcome.result.cost_usd,
        saved=outcome.saved,
        joke_id=outcome.stored.id if outcome.stored else None,
        topic=request.topic,
        style=request.style,
        category=request.category,
        warning=outcome.warning,
    )


@router.get("", response_model=JokeListResponse)
async def list_jokes(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    favorited: bool | None = Query(None),
    user_id: UserId = Depends(get_current_user),
    repository: JokeRepository = Depends(get_joke_repository),
):
    """List the caller's jokes, newest first."""
    jokes = await repository.list_for_user(user_id, limit, offset, favorited)
    return JokeListResponse(
        jokes=[JokeResponse.model_validate(j) for j in jokes],
        limit=limit,
        offset=offset,
    )


@router.get("/{joke_id}", response_model=JokeResponse)
async def get_joke(
    joke_id: UUID,
    user_id: UserId = Depends(get_current_user),
    repository: JokeRepository = Depends(get_joke_repository),
):
    joke = await repository.get_for_user(JokeId(joke_id), user_id)
    if joke is None:
        raise ResourceNotFoundError("Joke", str(joke_id))
    return JokeResponse.model_validate(joke)


@router.patch("/{joke_id}", response_model=JokeResponse)
async def update_joke(
    joke_id: UUID,
    body: JokeUpdate,
    user_id: UserId = Depends(get_current_user),
    repository: JokeRepository = Depends(get_joke_repository),
):
    """Rate, favorite, or mark a joke as shared."""
    fields = {
        name: value
        for name, value in body.model_dump(exclude_unset=True).items()
        if value is not None or name == "user_rating"
    }
    joke = await repository.update_for_user(JokeId(joke_id), user_id, fields)
    if joke is None:
        raise ResourceNotFoundError("Joke", str(joke_id))
    return JokeResponse.model_validate(joke)


@router.delete("/{joke_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_joke(
    joke_id: UUID,
    user_id: UserId = Depends(get_current_user),
    repository: JokeRepository = Depends(get_joke_repository),
):
    if not await repository.delete_for_user(JokeId(joke_id), user_id):
        raise ResourceNotFoundError("Joke", str(joke_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
