"""Joke Generator — ordered model fallback over a single provider.

Invariants:
    - Request is validated before any provider call
    - Prompt built once per request, reused for every candidate
    - Candidates attempted strictly one at a time, in configured order
    - A failed candidate is never retried; the loop advances to the next one
    - Blank completions count as failures
    - First success returns immediately; later candidates are never called
    - All candidates failed -> AllCandidatesExhaustedError with one entry per candidate
    - CancelledError propagates untouched (no further candidates attempted)

Design Decisions:
    - Provider client and candidate chain injected via constructor: no module globals
    - Failure kinds are collapsed for fallback but logged individually
    - HTTP 429 is treated like any other failure: no same-candidate backoff
"""

import logging
from collections.abc import Sequence

from punchline.core.domain_types import FailureKind
from punchline.core.errors import (
    AllCandidatesExhaustedError, CandidateFailure, ProviderCallError,
)
from punchline.core.generation_types import GenerationRequest, GenerationResult
from punchline.core.model_candidates import ModelCandidate
from punchline.core.prompt_builder import COMEDIAN_SYSTEM_PROMPT, build_joke_prompt
from punchline.core.repository_protocols import ProviderClient

logger = logging.getLogger(__name__)

COMEDY_TEMPERATURE = 0.8
DEFAULT_MAX_TOKENS = 300


class JokeGenerator:
    """Turns a GenerationRequest into a GenerationResult via the candidate chain."""

    def __init__(
        self,
        provider: ProviderClient,
        candidates: Sequence[ModelCandidate],
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = COMEDY_TEMPERATURE,
    ):
        if not candidates:
            raise ValueError("JokeGenerator requires at least one candidate")
        self._provider = provider
        self._candidates = tuple(candidates)
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def candidates(self) -> tuple[ModelCandidate, ...]:
        return self._candidates

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Run the fallback chain. Raises AllCandidatesExhaustedError."""
        request = GenerationRequest.create(
            request.topic, request.style, request.category,
        )
        prompt = build_joke_prompt(
            request.topic, request.style.value, request.category,
        )

        failures: list[CandidateFailure] = []
        for attempt, candidate in enumerate(self._candidates, start=1):
            try:
                result = await self._attempt(candidate, prompt)
            except ProviderCallError as e:
                failures.append(self._record_failure(candidate, e, attempt))
                continue
            logger.info(
                f"Joke generated with {candidate.identifier}",
                extra={
                    "model": candidate.identifier,
                    "attempt": attempt,
                    "tokens_used": result.tokens_used,
                    "cost_usd": result.cost_usd,
                },
            )
            return result

        raise AllCandidatesExhaustedError(failures)

    async def _attempt(
        self, candidate: ModelCandidate, prompt: str,
    ) -> GenerationResult:
        """One provider call; blank text raises like a transport failure."""
        completion = await self._provider.complete(
            system_prompt=COMEDIAN_SYSTEM_PROMPT,
            user_prompt=prompt,
            model=candidate.identifier,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        text = (completion.text or "").strip()
        if not text:
            raise ProviderCallError(
                FailureKind.EMPTY_COMPLETION, "Provider returned an empty completion",
            )
        tokens = max(completion.total_tokens or 0, 0)
        return GenerationResult(
            text=text,
            model_used=candidate.identifier,
            tokens_used=tokens,
            cost_usd=candidate.cost_for(tokens),
        )

    def _record_failure(
        self, candidate: ModelCandidate, e: ProviderCallError, attempt: int,
    ) -> CandidateFailure:
        failure = CandidateFailure(
            model=candidate.identifier,
            kind=e.kind,
            message=e.message,
            status_code=e.status_code,
        )
        logger.warning(
            f"Model {candidate.identifier} failed: {failure.describe()}",
            extra={
                "model": candidate.identifier,
                "attempt": attempt,
                "failure_kind": e.kind.value,
                "status_code": e.status_code,
            },
        )
        return failure
