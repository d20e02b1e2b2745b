"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - joke_models is non-empty and every configured rate is >= 0

Design Decisions:
    - Candidate order and rate table are separate settings: a model absent from
      the table is still usable and priced at default_cost_per_1k_tokens
    - List/dict settings accept JSON from the environment (pydantic-settings)
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from punchline.core.model_candidates import (
    DEFAULT_COST_PER_1K_TOKENS, DEFAULT_JOKE_MODELS, DEFAULT_MODEL_RATES,
    ModelCandidate, build_candidates,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://punchline:punchline@db:5432/punchline"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # OpenRouter
    openrouter_api_key: str = "sk-or-placeholder"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_timeout_seconds: float = 30
    openrouter_referer: str | None = "http://localhost:3000"
    openrouter_app_title: str | None = "Punchline"

    # Generation
    joke_models: list[str] = list(DEFAULT_JOKE_MODELS)
    model_cost_per_1k_tokens: dict[str, float] = dict(DEFAULT_MODEL_RATES)
    default_cost_per_1k_tokens: float = DEFAULT_COST_PER_1K_TOKENS
    generation_max_tokens: int = 300

    @field_validator("joke_models")
    @classmethod
    def require_models(cls, v: list[str]) -> list[str]:
        models = [m.strip() for m in v if m and m.strip()]
        if not models:
            raise ValueError("joke_models must list at least one model")
        return models

    @field_validator("model_cost_per_1k_tokens")
    @classmethod
    def require_non_negative_rates(cls, v: dict[str, float]) -> dict[str, float]:
        negative = [model for model, rate in v.items() if rate < 0]
        if negative:
            raise ValueError(f"negative cost rate for: {', '.join(negative)}")
        return v

    @field_validator("default_cost_per_1k_tokens")
    @classmethod
    def require_non_negative_default(cls, v: float) -> float:
        if v < 0:
            raise ValueError("default_cost_per_1k_tokens must be >= 0")
        return v

    # Supabase Auth
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = "anon-placeholder"
    auth_timeout_seconds: float = 10

    # API
    cors_origins: list[str] = ["http://localhost:8081"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def model_candidates(self) -> tuple[ModelCandidate, ...]:
        return build_candidates(
            self.joke_models,
            self.model_cost_per_1k_tokens,
            self.default_cost_per_1k_tokens,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
