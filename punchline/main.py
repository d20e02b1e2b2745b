"""Punchline API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PunchlineError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, provider client, and auth verifier created in the lifespan
      and torn down on shutdown
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from punchline.api.error_handlers import register_error_handlers
from punchline.api.routes import health, jokes
from punchline.config import Settings, get_settings
from punchline.infrastructure.database import init_db
from punchline.infrastructure.observability import setup_logging
from punchline.infrastructure.openrouter_client import OpenRouterClient
from punchline.infrastructure.supabase_auth import SupabaseAuthVerifier
from punchline.services.joke_generator import JokeGenerator

logger = logging.getLogger(__name__)


def build_provider(settings: Settings) -> OpenRouterClient:
    return OpenRouterClient(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        timeout_seconds=settings.openrouter_timeout_seconds,
        referer=settings.openrouter_referer,
        app_title=settings.openrouter_app_title,
    )


def build_joke_generator(
    settings: Settings, provider: OpenRouterClient,
) -> JokeGenerator:
    return JokeGenerator(
        provider,
        settings.model_candidates(),
        max_tokens=settings.generation_max_tokens,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    provider = build_provider(settings)
    generator = build_joke_generator(settings, provider)
    auth_http = httpx.AsyncClient(timeout=settings.auth_timeout_seconds)
    app.state.joke_generator = generator
    app.state.auth_verifier = SupabaseAuthVerifier(
        settings.supabase_url, settings.supabase_anon_key, auth_http,
    )
    logger.info(
        "Punchline API started with models: "
        + ", ".join(c.identifier for c in generator.candidates),
    )
    yield
    logger.info("Punchline API shutting down")
    await auth_http.aclose()
    await provider.aclose()
    await db.dispose()


app = FastAPI(
    title="Punchline API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(jokes.router)

register_error_handlers(app)
