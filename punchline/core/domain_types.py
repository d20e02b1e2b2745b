"""Domain Types — identity types and the closed set of joke styles.

Invariants:
    - UserId and JokeId wrap UUIDs — never use bare UUID in domain logic
    - JokeStyle is the only source of valid style values

Design Decisions:
    - str Enum: serializes to JSON and to the DB column without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
JokeId = NewType("JokeId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class JokeStyle(str, Enum):
    """The five recognized joke styles."""
    PUN = "pun"
    ONE_LINER = "one-liner"
    DAD_JOKE = "dad-joke"
    DARK = "dark"
    OBSERVATIONAL = "observational"


class FailureKind(str, Enum):
    """Why a single candidate attempt failed. Logged, never shown to users."""
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    CONNECTION_ERROR = "connection_error"
    HTTP_ERROR = "http_error"
    MALFORMED_RESPONSE = "malformed_response"
    EMPTY_COMPLETION = "empty_completion"
    UNKNOWN = "unknown"
