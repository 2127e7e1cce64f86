"""Scoring of passing program evaluations into a 0-100 match score with reasons."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

from lendermatch.services.matching.evaluator import (
    CriterionResult,
    ProgramEvaluation,
    format_money,
    format_value,
    label_for,
)

MAX_SCORE = Decimal("100")
MIN_SCORE = Decimal("0")

# Deducted once per soft-missed criterion. Uniform: criteria carry no weight.
SOFT_MISS_PENALTY = Decimal("10")


@dataclass
class MatchScore:
    """
    Score and explanation for a program that passed every hard criterion.

    Attributes:
        match_score: 0-100, 100 when every soft preference is met
        reasons: Human-readable reasons, location and amount first
        unmet_criteria: Names of criteria whose soft range was missed
    """

    match_score: Decimal
    reasons: List[str] = field(default_factory=list)
    unmet_criteria: List[str] = field(default_factory=list)

    @property
    def has_soft_misses(self) -> bool:
        return bool(self.unmet_criteria)


class MatchScorer:
    """Aggregates per-criterion outcomes into a match score."""

    def __init__(self, soft_miss_penalty: Decimal = SOFT_MISS_PENALTY):
        self.soft_miss_penalty = soft_miss_penalty

    def score(
        self,
        evaluation: ProgramEvaluation,
        state_code: Optional[str] = None,
        loan_amount: Optional[Any] = None,
    ) -> MatchScore:
        """
        Score a passing evaluation.

        Args:
            evaluation: Evaluation with no hard failures
            state_code: Scenario state, used for the coverage reason
            loan_amount: Scenario loan amount, falls back to the evaluated value

        Returns:
            MatchScore clamped to [0, 100]

        Raises:
            ValueError: If the evaluation hard-failed
        """
        if not evaluation.passed:
            raise ValueError(
                f"Cannot score program {evaluation.program.name}: it failed hard criteria"
            )

        soft_misses = evaluation.soft_misses
        raw_score = MAX_SCORE - self.soft_miss_penalty * len(soft_misses)
        match_score = max(MIN_SCORE, min(MAX_SCORE, raw_score))

        reasons: List[str] = []
        if state_code:
            reasons.append(f"Operates in {state_code.strip().upper()}")

        if loan_amount is None:
            loan_amount = evaluation.value_of("loan_amount")
        if loan_amount is not None:
            reasons.append(f"Can handle loan amount of {format_money(loan_amount)}")

        reasons.extend(self._soft_miss_reason(result) for result in soft_misses)

        return MatchScore(
            match_score=match_score,
            reasons=reasons,
            unmet_criteria=[result.name for result in soft_misses],
        )

    @staticmethod
    def _soft_miss_reason(result: CriterionResult) -> str:
        """E.g. "FICO 680 is below preferred 700 but meets minimum 660"."""
        criterion = result.criterion
        attribute = result.attribute
        label = label_for(attribute)
        shown = format_value(attribute, result.value)

        if criterion.soft_min is not None and result.value < criterion.soft_min:
            reason = f"{label} {shown} is below preferred {format_value(attribute, criterion.soft_min)}"
            if criterion.hard_min is not None:
                reason += f" but meets minimum {format_value(attribute, criterion.hard_min)}"
            return reason

        reason = f"{label} {shown} is above preferred {format_value(attribute, criterion.soft_max)}"
        if criterion.hard_max is not None:
            reason += f" but within maximum {format_value(attribute, criterion.hard_max)}"
        return reason
