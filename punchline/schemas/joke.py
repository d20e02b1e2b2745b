"""Joke Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - JokeGenerateRequest.topic: 1-200 chars, stripped, non-empty
    - style must be one of JokeStyle; accepted as "style", "jokeType" or "joke_type"
    - JokeUpdate requires at least one field; user_rating is 1-5
"""

from datetime import datetime
from uuid import UUID

from pydantic import (
    AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator,
)

from punchline.core.domain_types import JokeStyle


class JokeGenerateRequest(BaseModel):
    """Joke generation input."""
    topic: str = Field(min_length=1, max_length=200)
    style: JokeStyle = Field(
        validation_alias=AliasChoices("style", "jokeType", "joke_type"),
    )
    category: str | None = Field(None, max_length=100)

    @field_validator("topic")
    @classmethod
    def strip_topic(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("topic cannot be empty or whitespace")
        return v

    @field_validator("category")
    @classmethod
    def blank_category_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class JokeGenerateResponse(BaseModel):
    """Generation output: always present on success, saved or not."""
    text: str
    model: str
    tokens_used: int
    cost_usd: float
    saved: bool
    joke_id: UUID | None = None
    topic: str
    style: JokeStyle
    category: str | None = None
    warning: str | None = None


class JokeResponse(BaseModel):
    """A stored joke."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
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


class JokeListResponse(BaseModel):
    jokes: list[JokeResponse]
    limit: int
    offset: int


class JokeUpdate(BaseModel):
    """Owner feedback on a stored joke."""
    user_rating: int | None = Field(None, ge=1, le=5)
    favorited: bool | None = None
    shared: bool | None = None

    @model_validator(mode="after")
    def require_a_field(self):
        if not self.model_dump(exclude_unset=True):
            raise ValueError("at least one of user_rating, favorited, shared is required")
        return self
