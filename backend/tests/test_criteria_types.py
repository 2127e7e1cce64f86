"""Criterion data type coercion and hard/soft comparison."""
from decimal import Decimal

import pytest

from factories import make_criterion
from lendermatch.core.enums import CriterionDataType, CriterionOutcome
from lendermatch.core.exceptions import TypeCoercionError
from lendermatch.services.matching.criteria_types import (
    CriteriaTypeRegistry,
    DecimalHandler,
    IntegerHandler,
)


@pytest.fixture()
def registry():
    return CriteriaTypeRegistry()


def test_every_data_type_has_a_handler(registry):
    for data_type in CriterionDataType:
        assert registry.handler_for(data_type).data_type == data_type


def test_registry_rejects_incomplete_handler_set():
    with pytest.raises(ValueError, match="enum"):
        CriteriaTypeRegistry(handlers=[DecimalHandler(), IntegerHandler()])


def test_unknown_data_type_is_rejected(registry):
    with pytest.raises(ValueError):
        registry.handler_for("percentage")


@pytest.mark.parametrize(
    "raw, expected",
    [
        (595000, Decimal("595000")),
        ("595000", Decimal("595000")),
        ("$595,000", Decimal("595000")),
        (1.3, Decimal("1.3")),
        ("70%", Decimal("70")),
    ],
)
def test_decimal_coercion(registry, raw, expected):
    assert registry.coerce(CriterionDataType.DECIMAL, raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", True, None, [1], "NaN", "Infinity"])
def test_decimal_coercion_failures(registry, raw):
    with pytest.raises(TypeCoercionError):
        registry.coerce(CriterionDataType.DECIMAL, raw)


def test_integer_coercion(registry):
    assert registry.coerce(CriterionDataType.INTEGER, 720) == 720
    assert registry.coerce(CriterionDataType.INTEGER, "720") == 720
    assert registry.coerce(CriterionDataType.INTEGER, 720.0) == 720

    with pytest.raises(TypeCoercionError, match="fractional"):
        registry.coerce(CriterionDataType.INTEGER, 720.5)
    with pytest.raises(TypeCoercionError):
        registry.coerce(CriterionDataType.INTEGER, "seven hundred")


def test_enum_and_bool_coercion(registry):
    assert registry.coerce(CriterionDataType.ENUM, " SFR ") == "SFR"
    assert registry.coerce(CriterionDataType.BOOL, "yes") is True
    assert registry.coerce(CriterionDataType.BOOL, 0) is False

    with pytest.raises(TypeCoercionError):
        registry.coerce(CriterionDataType.ENUM, 5)
    with pytest.raises(TypeCoercionError):
        registry.coerce(CriterionDataType.BOOL, "maybe")
    with pytest.raises(TypeCoercionError):
        registry.coerce(CriterionDataType.BOOL, 2)


def test_bounds_are_inclusive(registry):
    criterion = make_criterion("loan_amount", hard_min="150000", hard_max="3000000")

    assert registry.compare(criterion, Decimal("150000")) == CriterionOutcome.PASS
    assert registry.compare(criterion, Decimal("3000000")) == CriterionOutcome.PASS
    assert registry.compare(criterion, Decimal("149999.99")) == CriterionOutcome.HARD_FAIL
    assert registry.compare(criterion, Decimal("3000000.01")) == CriterionOutcome.HARD_FAIL


def test_soft_range_inside_hard_range(registry):
    fico = make_criterion(
        "min_fico", CriterionDataType.INTEGER, hard_min="660", soft_min="700"
    )

    assert registry.compare(fico, 720) == CriterionOutcome.PASS
    assert registry.compare(fico, 700) == CriterionOutcome.PASS
    assert registry.compare(fico, 680) == CriterionOutcome.SOFT_MISS
    assert registry.compare(fico, 660) == CriterionOutcome.SOFT_MISS
    assert registry.compare(fico, 659) == CriterionOutcome.HARD_FAIL


def test_enum_membership_is_case_insensitive(registry):
    property_types = make_criterion(
        "property_types", CriterionDataType.ENUM, enum_values=["SFR", "Condo"]
    )

    assert registry.compare(property_types, "sfr") == CriterionOutcome.PASS
    assert registry.compare(property_types, "condo") == CriterionOutcome.PASS
    assert registry.compare(property_types, "MF") == CriterionOutcome.HARD_FAIL


def test_bool_equality(registry):
    warrantable = make_criterion("condo_warrantable", CriterionDataType.BOOL, bool_value=True)

    assert registry.compare(warrantable, True) == CriterionOutcome.PASS
    assert registry.compare(warrantable, False) == CriterionOutcome.HARD_FAIL


def test_vacuous_criteria(registry):
    assert registry.is_vacuous(make_criterion("min_fico", CriterionDataType.INTEGER))
    assert registry.is_vacuous(make_criterion("condo_warrantable", CriterionDataType.BOOL))
    assert registry.is_vacuous(make_criterion("property_types", CriterionDataType.ENUM))
    assert not registry.is_vacuous(make_criterion("max_ltv", hard_max="80"))


def test_validate_criterion_accepts_well_formed_bounds(registry):
    registry.validate_criterion(
        make_criterion("max_ltv", hard_max="80", soft_max="75")
    )
    registry.validate_criterion(
        make_criterion("property_types", CriterionDataType.ENUM, enum_values=["SFR"])
    )


@pytest.mark.parametrize(
    "criterion, problem",
    [
        (make_criterion("loan", hard_min="200", hard_max="100"), "hard_min 200 is greater than hard_max 100"),
        (make_criterion("fico", hard_min="700", soft_min="650"), "soft_min 650 is below hard_min 700"),
        (make_criterion("ltv", hard_max="75", soft_max="80"), "soft_max 80 is above hard_max 75"),
        (make_criterion("property_types", CriterionDataType.ENUM), "enum criterion requires enum_values"),
    ],
)
def test_validate_criterion_reports_problems(registry, criterion, problem):
    with pytest.raises(ValueError, match="Invalid criterion") as exc_info:
        registry.validate_criterion(criterion)
    assert problem in str(exc_info.value)
