"""Core enums for type safety across the application."""

from enum import Enum


class CriterionDataType(str, Enum):
    """Data types a program criterion can be declared with."""

    DECIMAL = "decimal"
    INTEGER = "integer"
    ENUM = "enum"
    BOOL = "bool"


class CriterionOutcome(str, Enum):
    """Outcome of evaluating one criterion against a scenario."""

    PASS = "pass"  # inside hard and soft range
    SOFT_MISS = "soft_miss"  # inside hard range, outside soft range
    HARD_FAIL = "hard_fail"
    SKIPPED = "skipped"  # optional attribute absent, or criterion has no bounds


class MatchType(str, Enum):
    """How a qualifying program matched."""

    HARD = "HARD"
    SOFT = "SOFT"


class ScenarioStatus(str, Enum):
    """Loan scenario workflow states."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    PROCESSING = "processing"
    EVALUATED = "evaluated"
    ERROR = "error"
    ARCHIVED = "archived"


US_STATE_CODES: tuple[str, ...] = (
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "FL",
    "GA", "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME",
    "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH",
    "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI",
    "SC", "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI",
    "WY",
)
