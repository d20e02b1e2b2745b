"""Model Candidates — the ordered fallback chain and its cost table.

Invariants:
    - Candidate order is configuration, never recomputed at runtime
    - Rates are >= 0; a model missing from the rate table uses the default rate
    - cost = tokens / 1000 * rate of the candidate that produced the tokens

Design Decisions:
    - Frozen dataclasses + tuple: shared across concurrent requests without locks
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

DEFAULT_COST_PER_1K_TOKENS = 0.001

# Cheapest-quality-first; the second entry is the fallback
DEFAULT_JOKE_MODELS: tuple[str, ...] = (
    "mistralai/mistral-small-latest",
    "meta-llama/llama-3.1-8b-instruct",
)

DEFAULT_MODEL_RATES: Mapping[str, float] = MappingProxyType({
    "mistralai/mistral-small-latest": 0.001,
    "meta-llama/llama-3.1-8b-instruct": 0.0002,
})


@dataclass(frozen=True)
class ModelCandidate:
    """One model in the fallback chain with its price per 1k tokens."""
    identifier: str
    cost_per_1k_tokens: float = DEFAULT_COST_PER_1K_TOKENS

    def __post_init__(self):
        if not self.identifier or not self.identifier.strip():
            raise ValueError("candidate identifier cannot be empty")
        if self.cost_per_1k_tokens < 0:
            raise ValueError(
                f"cost_per_1k_tokens must be >= 0 for {self.identifier}",
            )

    def cost_for(self, tokens: int) -> float:
        return (tokens / 1000) * self.cost_per_1k_tokens


def resolve_rate(
    model: str,
    rates: Mapping[str, float],
    default_rate: float = DEFAULT_COST_PER_1K_TOKENS,
) -> float:
    """Rate for a model, falling back to default_rate when unknown."""
    rate = rates.get(model)
    return default_rate if rate is None else rate


def build_candidates(
    models: Iterable[str],
    rates: Mapping[str, float] = DEFAULT_MODEL_RATES,
    default_rate: float = DEFAULT_COST_PER_1K_TOKENS,
) -> tuple[ModelCandidate, ...]:
    """Resolve configured model identifiers into an immutable candidate chain."""
    candidates = tuple(
        ModelCandidate(model, resolve_rate(model, rates, default_rate))
        for model in models
    )
    if not candidates:
        raise ValueError("at least one candidate model is required")
    return candidates
