"""OpenRouter Client — one chat completion per call, every failure typed.

Invariants:
    - Exactly one HTTP request per complete() call (SDK retries disabled)
    - Every call bounded by timeout_seconds
    - Timeouts, 4xx/5xx, connection errors, undecodable bodies, and malformed payloads all raise
      ProviderCallError with a FailureKind, status code when known, and message
    - CancelledError (BaseException) passes through uncaught
    - Missing usage block -> total_tokens = 0

Design Decisions:
    - OpenAI SDK pointed at OpenRouter's OpenAI-compatible endpoint
    - No retry here: fallback across candidates is the JokeGenerator's job
"""

import logging
from typing import Any

import openai
from openai import (
    APIConnectionError,
    APIError,
    APIResponseValidationError,
    APIStatusError,
    APITimeoutError,
    RateLimitError,
)

from punchline.core.domain_types import FailureKind
from punchline.core.errors import ProviderCallError
from punchline.core.generation_types import ProviderCompletion

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterClient:
    """Chat completions against OpenRouter, mapped to ProviderCallError."""

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENROUTER_BASE_URL,
        timeout_seconds: float = 30,
        referer: str | None = None,
        app_title: str | None = None,
        client: Any | None = None,
    ):
        headers = {}
        if referer:
            headers["HTTP-Referer"] = referer
        if app_title:
            headers["X-Title"] = app_title
        self.client = client or openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
            default_headers=headers or None,
        )

    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> ProviderCompletion:
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except APITimeoutError:
            raise ProviderCallError(FailureKind.TIMEOUT, "Provider request timed out")
        except APIConnectionError as e:
            raise ProviderCallError(
                FailureKind.CONNECTION_ERROR, f"Connection error: {e}",
            )
        except RateLimitError as e:
            raise ProviderCallError(
                FailureKind.RATE_LIMIT, _status_message(e), e.status_code,
            )
        except APIStatusError as e:
            raise ProviderCallError(
                FailureKind.HTTP_ERROR, _status_message(e), e.status_code,
            )
        except APIResponseValidationError as e:
            raise ProviderCallError(
                FailureKind.MALFORMED_RESPONSE, str(e), e.status_code,
            )
        except APIError as e:
            logger.error(f"Unexpected provider error: {e}", exc_info=True)
            raise ProviderCallError(FailureKind.UNKNOWN, str(e))
        except ValueError as e:
            # 200 with a body the SDK cannot decode (e.g. a gateway HTML page)
            raise ProviderCallError(
                FailureKind.MALFORMED_RESPONSE, f"Unparseable provider body: {e}",
            )

        return parse_completion(response)

    async def aclose(self) -> None:
        await self.client.close()


def parse_completion(response: Any) -> ProviderCompletion:
    """Extract text and total tokens from a chat completion object."""
    choices = getattr(response, "choices", None)
    if not choices:
        raise ProviderCallError(
            FailureKind.MALFORMED_RESPONSE, "Provider response missing choices",
        )
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if content is not None and not isinstance(content, str):
        raise ProviderCallError(
            FailureKind.MALFORMED_RESPONSE, "Provider message content is not text",
        )

    usage = getattr(response, "usage", None)
    total_tokens = getattr(usage, "total_tokens", None) if usage else None
    if isinstance(total_tokens, bool) or not isinstance(total_tokens, int):
        total_tokens = 0

    return ProviderCompletion(text=(content or "").strip(), total_tokens=total_tokens)


def _status_message(e: APIStatusError) -> str:
    """Prefer the provider's error.message from the body over the SDK's repr."""
    body = e.body
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return e.message
