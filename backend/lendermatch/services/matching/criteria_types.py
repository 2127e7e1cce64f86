"""Criterion data type semantics: value coercion and hard/soft comparison."""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from lendermatch.core.enums import CriterionDataType, CriterionOutcome
from lendermatch.core.exceptions import TypeCoercionError
from lendermatch.models.domain.lender import ProgramCriterion

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"true", "yes", "y", "1"}
_FALSE_STRINGS = {"false", "no", "n", "0"}


def _as_decimal(bound: Any) -> Optional[Decimal]:
    """Normalize a stored bound to Decimal."""
    if bound is None:
        return None
    if isinstance(bound, Decimal):
        return bound
    return Decimal(str(bound))


def _parse_decimal(data_type: str, raw: Any) -> Decimal:
    """Parse int/float/Decimal/str into a finite Decimal."""
    if isinstance(raw, bool):
        raise TypeCoercionError(data_type, raw, "booleans are not numeric")

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = Decimal(str(raw))
    elif isinstance(raw, str):
        # Tolerate "$595,000" and "70%" style decorations
        cleaned = raw.strip().replace("$", "").replace(",", "").replace("%", "").strip()
        if not cleaned:
            raise TypeCoercionError(data_type, raw, "empty string")
        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            raise TypeCoercionError(data_type, raw) from None
    else:
        raise TypeCoercionError(data_type, raw, f"unsupported type {type(raw).__name__}")

    if not value.is_finite():
        raise TypeCoercionError(data_type, raw, "value is not finite")
    return value


class CriterionTypeHandler(ABC):
    """
    Semantics for one criterion data type (Strategy pattern).

    A handler knows how to coerce a raw scenario value into its typed form,
    how to test that value against a criterion's hard and soft constraints,
    and which stored fields make a criterion non-vacuous.
    """

    data_type: CriterionDataType

    @abstractmethod
    def coerce(self, raw: Any) -> Any:
        """
        Convert a raw scenario value into the typed comparable value.

        Raises:
            TypeCoercionError: If the value cannot be interpreted as this type
        """

    @abstractmethod
    def within_hard(self, criterion: ProgramCriterion, value: Any) -> bool:
        """Whether a coerced value satisfies the criterion's hard constraint."""

    def within_soft(self, criterion: ProgramCriterion, value: Any) -> bool:
        """Whether a coerced value lies inside the preferred range. No soft variant by default."""
        return True

    @abstractmethod
    def is_vacuous(self, criterion: ProgramCriterion) -> bool:
        """Whether the criterion stores no constraint at all."""

    def validate(self, criterion: ProgramCriterion) -> List[str]:
        """Return authoring problems with the criterion's stored fields."""
        return []


class NumericHandler(CriterionTypeHandler):
    """Shared inclusive range comparison for decimal and integer criteria."""

    def within_hard(self, criterion: ProgramCriterion, value: Any) -> bool:
        return self._in_range(value, criterion.hard_min, criterion.hard_max)

    def within_soft(self, criterion: ProgramCriterion, value: Any) -> bool:
        return self._in_range(value, criterion.soft_min, criterion.soft_max)

    def is_vacuous(self, criterion: ProgramCriterion) -> bool:
        return all(
            bound is None
            for bound in (
                criterion.hard_min,
                criterion.hard_max,
                criterion.soft_min,
                criterion.soft_max,
            )
        )

    def validate(self, criterion: ProgramCriterion) -> List[str]:
        problems = []
        hard_min = _as_decimal(criterion.hard_min)
        hard_max = _as_decimal(criterion.hard_max)
        soft_min = _as_decimal(criterion.soft_min)
        soft_max = _as_decimal(criterion.soft_max)

        if hard_min is not None and hard_max is not None and hard_min > hard_max:
            problems.append(f"hard_min {hard_min} is greater than hard_max {hard_max}")
        if soft_min is not None and soft_max is not None and soft_min > soft_max:
            problems.append(f"soft_min {soft_min} is greater than soft_max {soft_max}")

        for label, soft in (("soft_min", soft_min), ("soft_max", soft_max)):
            if soft is None:
                continue
            if hard_min is not None and soft < hard_min:
                problems.append(f"{label} {soft} is below hard_min {hard_min}")
            if hard_max is not None and soft > hard_max:
                problems.append(f"{label} {soft} is above hard_max {hard_max}")

        if criterion.enum_values:
            problems.append("numeric criterion must not carry enum_values")
        return problems

    @staticmethod
    def _in_range(value: Any, lower: Any, upper: Any) -> bool:
        lower = _as_decimal(lower)
        upper = _as_decimal(upper)
        if lower is not None and value < lower:
            return False
        if upper is not None and value > upper:
            return False
        return True


class DecimalHandler(NumericHandler):
    """Decimal criteria such as loan amount, LTV and DSCR."""

    data_type = CriterionDataType.DECIMAL

    def coerce(self, raw: Any) -> Decimal:
        return _parse_decimal(self.data_type.value, raw)


class IntegerHandler(NumericHandler):
    """Integer criteria such as FICO, property count and term in months."""

    data_type = CriterionDataType.INTEGER

    def coerce(self, raw: Any) -> int:
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        value = _parse_decimal(self.data_type.value, raw)
        if value != value.to_integral_value():
            raise TypeCoercionError(self.data_type.value, raw, "fractional part not allowed")
        return int(value)


class EnumHandler(CriterionTypeHandler):
    """Membership in a fixed set of allowed values. Compared case-insensitively."""

    data_type = CriterionDataType.ENUM

    def coerce(self, raw: Any) -> str:
        if not isinstance(raw, str):
            raise TypeCoercionError(self.data_type.value, raw, "expected a string")
        value = raw.strip()
        if not value:
            raise TypeCoercionError(self.data_type.value, raw, "empty string")
        return value

    def within_hard(self, criterion: ProgramCriterion, value: Any) -> bool:
        if not criterion.enum_values:
            return True
        allowed = {item.strip().casefold() for item in criterion.enum_values}
        return value.casefold() in allowed

    def is_vacuous(self, criterion: ProgramCriterion) -> bool:
        return not criterion.enum_values

    def validate(self, criterion: ProgramCriterion) -> List[str]:
        problems = []
        if not criterion.enum_values:
            problems.append("enum criterion requires enum_values")
        if any(
            bound is not None
            for bound in (
                criterion.hard_min,
                criterion.hard_max,
                criterion.soft_min,
                criterion.soft_max,
            )
        ):
            problems.append("enum criterion must not carry numeric bounds")
        return problems


class BoolHandler(CriterionTypeHandler):
    """Equality against the stored bool_value."""

    data_type = CriterionDataType.BOOL

    def coerce(self, raw: Any) -> bool:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        if isinstance(raw, str):
            lowered = raw.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise TypeCoercionError(self.data_type.value, raw)

    def within_hard(self, criterion: ProgramCriterion, value: Any) -> bool:
        if criterion.bool_value is None:
            return True
        return value == criterion.bool_value

    def is_vacuous(self, criterion: ProgramCriterion) -> bool:
        return criterion.bool_value is None

    def validate(self, criterion: ProgramCriterion) -> List[str]:
        if any(
            bound is not None
            for bound in (
                criterion.hard_min,
                criterion.hard_max,
                criterion.soft_min,
                criterion.soft_max,
            )
        ):
            return ["bool criterion must not carry numeric bounds"]
        return []


DEFAULT_HANDLERS: tuple[CriterionTypeHandler, ...] = (
    DecimalHandler(),
    IntegerHandler(),
    EnumHandler(),
    BoolHandler(),
)


class CriteriaTypeRegistry:
    """
    Registry of criterion type handlers keyed by CriterionDataType.

    Construction fails unless every CriterionDataType member has a handler,
    so adding a new data type without its semantics is caught at start-up
    rather than during evaluation.
    """

    def __init__(self, handlers: Optional[Iterable[CriterionTypeHandler]] = None):
        """
        Initialize the registry.

        Args:
            handlers: Handlers to register (defaults to the built-in set)

        Raises:
            ValueError: If any data type is left without a handler
        """
        self._handlers: Dict[CriterionDataType, CriterionTypeHandler] = {}
        for handler in handlers if handlers is not None else DEFAULT_HANDLERS:
            self._handlers[handler.data_type] = handler

        missing = [member.value for member in CriterionDataType if member not in self._handlers]
        if missing:
            raise ValueError(f"No criterion handler registered for data types: {', '.join(missing)}")

    def handler_for(self, data_type: Any) -> CriterionTypeHandler:
        """
        Look up the handler for a data type.

        Args:
            data_type: CriterionDataType member or its string value

        Returns:
            The registered handler

        Raises:
            ValueError: If the data type is unknown
        """
        return self._handlers[CriterionDataType(data_type)]

    def coerce(self, data_type: Any, raw: Any) -> Any:
        """
        Coerce a raw scenario value into the typed value for a data type.

        Raises:
            TypeCoercionError: If the value cannot be interpreted as the type
        """
        return self.handler_for(data_type).coerce(raw)

    def is_vacuous(self, criterion: ProgramCriterion) -> bool:
        """Whether a criterion has no stored constraint and is trivially satisfied."""
        return self.handler_for(criterion.data_type).is_vacuous(criterion)

    def compare(self, criterion: ProgramCriterion, value: Any) -> CriterionOutcome:
        """
        Compare an already-coerced value against a criterion.

        Args:
            criterion: The criterion to test
            value: Value returned by coerce() for the criterion's data type

        Returns:
            HARD_FAIL, SOFT_MISS or PASS
        """
        handler = self.handler_for(criterion.data_type)
        if not handler.within_hard(criterion, value):
            return CriterionOutcome.HARD_FAIL
        if not handler.within_soft(criterion, value):
            return CriterionOutcome.SOFT_MISS
        return CriterionOutcome.PASS

    def validate_criterion(self, criterion: ProgramCriterion) -> None:
        """
        Check a criterion's stored fields against the authoring invariants.

        Raises:
            ValueError: Listing every problem found
        """
        problems = self.handler_for(criterion.data_type).validate(criterion)
        if problems:
            raise ValueError(f"Invalid criterion '{criterion.name}': {'; '.join(problems)}")
