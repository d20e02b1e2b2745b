"""Error Hierarchy — typed, categorized exceptions for all Punchline failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No provider or database internals leak into user-facing messages

Design Decisions:
    - Single hierarchy with PunchlineError base: one FastAPI handler catches all
    - ProviderCallError is NOT a PunchlineError: it never crosses the HTTP boundary,
      the generator consumes it and moves on to the next candidate
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from punchline.core.domain_types import FailureKind


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    joke_id: str | None = None
    debug_info: dict[str, Any] | None = None


class PunchlineError(Exception):
    """Base exception for all Punchline errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "joke_id": self.context.joke_id,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class JokeValidationError(PunchlineError):
    """Generation request failed validation (topic or style)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class UnauthenticatedError(PunchlineError):
    """Bearer token missing, malformed, or rejected by the identity provider."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ResourceNotFoundError(PunchlineError):
    """Requested resource does not exist (or belongs to another user)."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(PunchlineError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class AuthServiceUnavailableError(PunchlineError):
    """Identity provider could not be reached."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Authentication service unavailable",
            "AUTH_SERVICE_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 503,
        )


@dataclass(frozen=True)
class CandidateFailure:
    """One failed attempt against one candidate model."""
    model: str
    kind: FailureKind
    message: str
    status_code: int | None = None

    def describe(self) -> str:
        status = f" [{self.status_code}]" if self.status_code is not None else ""
        return f"{self.model}: {self.kind.value}{status} {self.message}"


class AllCandidatesExhaustedError(PunchlineError):
    """Every configured candidate failed. Details are for logs only."""
    def __init__(
        self, failures: list[CandidateFailure], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Failed to generate joke",
            "GENERATION_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.failures = list(failures)


class ProviderCallError(Exception):
    """A single provider call failed (transport, status, or payload)."""

    def __init__(
        self, kind: FailureKind, message: str, status_code: int | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
