"""Evaluation of one scenario against one program version's criteria."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence

from lendermatch.core.enums import CriterionOutcome
from lendermatch.core.exceptions import MissingRequiredAttribute, TypeCoercionError
from lendermatch.models.domain.lender import Program, ProgramCriterion
from lendermatch.services.matching.criteria_types import CriteriaTypeRegistry

logger = logging.getLogger(__name__)

# Criterion name -> scenario attribute it constrains, when they differ
CRITERION_ATTRIBUTE_ALIASES: dict[str, str] = {
    "min_loan_amount": "loan_amount",
    "max_loan_amount": "loan_amount",
    "min_fico": "fico",
    "max_ltv": "ltv",
    "min_dscr": "dscr",
    "property_types": "property_type",
    "min_properties": "property_count",
    "max_properties": "property_count",
    "min_property_value": "property_value",
    "max_ltc": "ltc",
    "max_arv": "arv",
}

ATTRIBUTE_LABELS: dict[str, str] = {
    "loan_amount": "Loan amount",
    "fico": "FICO",
    "ltv": "LTV",
    "dscr": "DSCR",
    "ltc": "LTC",
    "arv": "ARV",
    "property_type": "Property type",
    "property_count": "Property count",
    "property_value": "Property value",
    "term_months": "Term (months)",
}

MONEY_ATTRIBUTES = {"loan_amount", "property_value", "purchase_price"}
PERCENT_ATTRIBUTES = {"ltv", "ltc", "arv"}


def attribute_for(criterion_name: str) -> str:
    """Scenario attribute a criterion constrains."""
    return CRITERION_ATTRIBUTE_ALIASES.get(criterion_name, criterion_name)


def label_for(attribute: str) -> str:
    """Human-readable label for a scenario attribute."""
    return ATTRIBUTE_LABELS.get(attribute, attribute.replace("_", " ").capitalize())


def format_money(value: Any) -> str:
    """Format an amount as dollars, e.g. $595,000."""
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def format_value(attribute: str, value: Any) -> str:
    """Format a scenario value or bound for use in reasons."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return str(value)
    if attribute in MONEY_ATTRIBUTES:
        return format_money(value)

    number = Decimal(str(value))
    if number == number.to_integral_value():
        text = str(int(number))
    else:
        text = format(number.normalize(), "f")
    if attribute in PERCENT_ATTRIBUTES:
        return f"{text}%"
    return text


@dataclass
class CriterionResult:
    """
    Outcome of evaluating a single criterion.

    Attributes:
        criterion: The criterion evaluated
        outcome: PASS, SOFT_MISS, HARD_FAIL or SKIPPED
        attribute: Scenario attribute the criterion was resolved against
        value: Coerced scenario value (raw value on type mismatch, None when absent)
        reason: Human-readable explanation for non-passing outcomes
    """

    criterion: ProgramCriterion
    outcome: CriterionOutcome
    attribute: str
    value: Any = None
    reason: Optional[str] = None

    @property
    def name(self) -> str:
        return self.criterion.name


@dataclass
class ProgramEvaluation:
    """
    Result of evaluating a scenario against every active criterion of a program version.

    Attributes:
        program: The program version evaluated
        passed: True iff no criterion hard-failed
        criterion_results: One result per active criterion, in criterion order
    """

    program: Program
    passed: bool
    criterion_results: List[CriterionResult] = field(default_factory=list)

    @property
    def hard_failures(self) -> List[CriterionResult]:
        return [r for r in self.criterion_results if r.outcome == CriterionOutcome.HARD_FAIL]

    @property
    def soft_misses(self) -> List[CriterionResult]:
        return [r for r in self.criterion_results if r.outcome == CriterionOutcome.SOFT_MISS]

    def value_of(self, attribute: str) -> Any:
        """Coerced value of an attribute from any criterion that did not hard-fail."""
        for result in self.criterion_results:
            if (
                result.attribute == attribute
                and result.value is not None
                and result.outcome != CriterionOutcome.HARD_FAIL
            ):
                return result.value
        return None


class CriteriaEvaluator:
    """
    Evaluates a scenario's attribute map against a program version's criteria.

    Every active criterion is evaluated, so all violations are reported
    rather than only the first. Coercion failures and missing required
    attributes become HARD_FAIL results and never propagate.
    """

    def __init__(self, registry: Optional[CriteriaTypeRegistry] = None):
        self.registry = registry or CriteriaTypeRegistry()

    def evaluate(
        self,
        scenario: Mapping[str, Any],
        program: Program,
        criteria: Sequence[ProgramCriterion],
    ) -> ProgramEvaluation:
        """
        Evaluate a scenario against a program version.

        Args:
            scenario: Named scenario attributes (snake_case)
            program: The program version being evaluated
            criteria: Criteria attached to that program version

        Returns:
            ProgramEvaluation with per-criterion results
        """
        results = [
            self._evaluate_criterion(scenario, criterion)
            for criterion in criteria
            if criterion.active
        ]
        passed = all(r.outcome != CriterionOutcome.HARD_FAIL for r in results)
        return ProgramEvaluation(program=program, passed=passed, criterion_results=results)

    def _evaluate_criterion(
        self, scenario: Mapping[str, Any], criterion: ProgramCriterion
    ) -> CriterionResult:
        attribute = attribute_for(criterion.name)

        try:
            if self.registry.is_vacuous(criterion):
                return CriterionResult(
                    criterion=criterion,
                    outcome=CriterionOutcome.SKIPPED,
                    attribute=attribute,
                    reason="No constraint configured",
                )

            attribute, raw = self._resolve_value(scenario, criterion)
            if raw is None:
                return CriterionResult(
                    criterion=criterion,
                    outcome=CriterionOutcome.SKIPPED,
                    attribute=attribute,
                    reason=f"Optional field '{attribute}' not provided",
                )

            value = self.registry.coerce(criterion.data_type, raw)
        except MissingRequiredAttribute as e:
            return CriterionResult(
                criterion=criterion,
                outcome=CriterionOutcome.HARD_FAIL,
                attribute=e.attribute,
                reason=str(e),
            )
        except TypeCoercionError as e:
            return CriterionResult(
                criterion=criterion,
                outcome=CriterionOutcome.HARD_FAIL,
                attribute=attribute,
                value=e.value,
                reason=f"Type mismatch for '{criterion.name}': {e}",
            )
        except ValueError as e:
            logger.warning(f"Criterion {criterion.criterion_id} ({criterion.name}) could not be evaluated: {e}")
            return CriterionResult(
                criterion=criterion,
                outcome=CriterionOutcome.HARD_FAIL,
                attribute=attribute,
                reason=f"Evaluation error: {e}",
            )

        outcome = self.registry.compare(criterion, value)
        reason = None
        if outcome == CriterionOutcome.HARD_FAIL:
            reason = self._hard_fail_reason(criterion, attribute, value)

        return CriterionResult(
            criterion=criterion,
            outcome=outcome,
            attribute=attribute,
            value=value,
            reason=reason,
        )

    @staticmethod
    def _resolve_value(
        scenario: Mapping[str, Any], criterion: ProgramCriterion
    ) -> tuple[str, Any]:
        """
        Find the scenario value for a criterion: exact name first, then alias.

        Returns:
            (attribute name, raw value); the value is None if absent and optional

        Raises:
            MissingRequiredAttribute: If absent and the criterion is required
        """
        if scenario.get(criterion.name) is not None:
            return criterion.name, scenario[criterion.name]

        attribute = attribute_for(criterion.name)
        raw = scenario.get(attribute)
        if raw is None and criterion.required_flag:
            raise MissingRequiredAttribute(criterion.name, attribute)
        return attribute, raw

    @staticmethod
    def _hard_fail_reason(criterion: ProgramCriterion, attribute: str, value: Any) -> str:
        label = label_for(attribute)
        shown = format_value(attribute, value)

        if criterion.enum_values:
            allowed = ", ".join(criterion.enum_values)
            return f"{label} {shown} is not one of the allowed values: {allowed}"
        if criterion.bool_value is not None:
            expected = "true" if criterion.bool_value else "false"
            return f"{label} must be {expected}"
        if criterion.hard_min is not None and value < criterion.hard_min:
            return f"{label} {shown} is below minimum {format_value(attribute, criterion.hard_min)}"
        return f"{label} {shown} is above maximum {format_value(attribute, criterion.hard_max)}"
