"""Generation Types — request, provider completion, and result value objects.

Invariants:
    - GenerationRequest.create() is the only way a request enters the generator:
      topic non-empty after strip, style one of JokeStyle
    - GenerationResult is immutable, text non-empty, tokens and cost >= 0
"""

from dataclasses import dataclass

from punchline.core.domain_types import JokeStyle
from punchline.core.errors import JokeValidationError


@dataclass(frozen=True)
class GenerationRequest:
    """Validated description of the joke to generate."""
    topic: str
    style: JokeStyle
    category: str | None = None

    @classmethod
    def create(
        cls, topic: str | None, style: str | JokeStyle | None,
        category: str | None = None,
    ) -> "GenerationRequest":
        """Validate raw input and build a request, or raise JokeValidationError."""
        if not isinstance(topic, str) or not topic.strip():
            raise JokeValidationError("topic is required", field="topic")
        if style is None:
            raise JokeValidationError("style is required", field="style")
        try:
            parsed_style = JokeStyle(style)
        except ValueError:
            raise JokeValidationError(
                f"Invalid joke style: {style}", field="style",
            )
        if category is not None and not category.strip():
            category = None
        return cls(
            topic=topic.strip(),
            style=parsed_style,
            category=category.strip() if category else None,
        )


@dataclass(frozen=True)
class ProviderCompletion:
    """Raw normalized output of one provider call."""
    text: str
    total_tokens: int = 0


@dataclass(frozen=True)
class GenerationResult:
    """A successful generation: text plus accounting metadata."""
    text: str
    model_used: str
    tokens_used: int
    cost_usd: float
