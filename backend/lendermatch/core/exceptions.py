"""Exceptions raised by the matching engine and its reference-data stores."""

from typing import Any, Optional


class MatchingError(Exception):
    """Base class for matching engine errors."""


class TypeCoercionError(MatchingError, ValueError):
    """A scenario value cannot be interpreted as the criterion's declared type."""

    def __init__(self, data_type: str, value: Any, detail: Optional[str] = None):
        self.data_type = data_type
        self.value = value
        message = f"Cannot interpret {value!r} as {data_type}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MissingRequiredAttribute(MatchingError):
    """A scenario has no value for a criterion marked as required."""

    def __init__(self, criterion_name: str, attribute: str):
        self.criterion_name = criterion_name
        self.attribute = attribute
        super().__init__(
            f"Missing required field '{attribute}' for criterion '{criterion_name}'"
        )


class MalformedPricingBand(MatchingError, ValueError):
    """A pricing matrix band string cannot be parsed."""

    def __init__(self, band: Any):
        self.band = band
        super().__init__(f"Malformed pricing band: {band!r}")


class ReferenceDataUnavailable(MatchingError):
    """The reference-data store cannot be reached or queried."""
