"""Matching orchestration: geography, criteria, scoring, pricing and ranking."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from lendermatch.core.enums import CriterionDataType
from lendermatch.core.exceptions import TypeCoercionError
from lendermatch.models.domain.lender import Lender, Program
from lendermatch.services.matching.criteria_types import CriteriaTypeRegistry
from lendermatch.services.matching.evaluator import CriteriaEvaluator, ProgramEvaluation
from lendermatch.services.matching.geography import GeographicCoverageResolver
from lendermatch.services.matching.pricing import PricingTier, PricingTierResolver
from lendermatch.services.matching.scoring import MatchScore, MatchScorer
from lendermatch.services.matching.store import ReferenceDataStore

logger = logging.getLogger(__name__)

REJECTED_BY_GEOGRAPHY = "geography"
REJECTED_BY_CRITERIA = "criteria"


@dataclass
class RankedMatch:
    """
    A program version the scenario qualifies for.

    Attributes:
        lender: Owning lender
        program: Matched program version
        evaluation: Per-criterion evaluation
        score: Match score and reasons
        pricing: Selected pricing tier, None when no tier applies
    """

    lender: Lender
    program: Program
    evaluation: ProgramEvaluation
    score: MatchScore
    pricing: Optional[PricingTier] = None

    @property
    def match_score(self) -> Decimal:
        return self.score.match_score

    @property
    def reasons(self) -> List[str]:
        return self.score.reasons

    @property
    def unmet_criteria(self) -> List[str]:
        return self.score.unmet_criteria

    def sort_key(self) -> tuple:
        """Score desc, lender profile score desc (missing last), lender name, program name."""
        profile = self.lender.profile_score
        return (
            -self.match_score,
            profile is None,
            -(profile or 0),
            self.lender.name,
            self.program.name,
            self.program.program_version,
        )


@dataclass
class RejectedProgram:
    """
    A candidate program version the scenario does not qualify for.

    Attributes:
        lender: Owning lender
        program: Rejected program version
        stage: "geography" or "criteria"
        reasons: Why the program was rejected
    """

    lender: Lender
    program: Program
    stage: str
    reasons: List[str] = field(default_factory=list)


@dataclass
class MatchReport:
    """Full outcome of matching one scenario."""

    matches: List[RankedMatch] = field(default_factory=list)
    rejections: List[RejectedProgram] = field(default_factory=list)
    lenders_evaluated: int = 0
    programs_evaluated: int = 0


class MatchingService:
    """
    Finds and ranks the lender programs a scenario qualifies for.

    Pipeline per candidate program version:
        1. Geography filter (program metro override, then lender coverage)
        2. Criteria evaluation, hard failures dropped
        3. Scoring of survivors
        4. Pricing tier enrichment

    Matching is read-only over the reference-data store, so a single
    instance can serve concurrent requests.
    """

    def __init__(
        self,
        store: ReferenceDataStore,
        registry: Optional[CriteriaTypeRegistry] = None,
        scorer: Optional[MatchScorer] = None,
        pricing_resolver: Optional[PricingTierResolver] = None,
    ):
        self.store = store
        self.registry = registry or CriteriaTypeRegistry()
        self.geography = GeographicCoverageResolver(store)
        self.evaluator = CriteriaEvaluator(self.registry)
        self.scorer = scorer or MatchScorer()
        self.pricing_resolver = pricing_resolver or PricingTierResolver()

    async def find_matches(
        self, scenario: Mapping[str, Any], as_of: Optional[date] = None
    ) -> List[RankedMatch]:
        """
        Ranked matches for a scenario. An empty list when nothing qualifies.

        Args:
            scenario: Named scenario attributes (snake_case)
            as_of: Date programs must be valid on (defaults to today)

        Returns:
            Matches ordered by score, lender profile score, lender name, program name

        Raises:
            ReferenceDataUnavailable: If reference data cannot be loaded
        """
        report = await self.evaluate(scenario, as_of=as_of)
        return report.matches

    async def evaluate(
        self, scenario: Mapping[str, Any], as_of: Optional[date] = None
    ) -> MatchReport:
        """
        Evaluate a scenario against every candidate program, keeping rejections.

        Args:
            scenario: Named scenario attributes (snake_case)
            as_of: Date programs must be valid on (defaults to today)

        Returns:
            MatchReport with ranked matches and rejected programs

        Raises:
            ReferenceDataUnavailable: If reference data cannot be loaded
        """
        as_of = as_of or date.today()
        state_code = self._state_code(scenario)
        metro_id = self._metro_id(scenario)
        ltv = self._decimal_attribute(scenario, "ltv")
        dscr = self._decimal_attribute(scenario, "dscr")

        report = MatchReport()
        lenders = await self.store.list_active_lenders()
        report.lenders_evaluated = len(lenders)

        for lender in lenders:
            programs = await self.store.list_active_programs(lender.lender_id, as_of)

            for program in programs:
                report.programs_evaluated += 1

                covered = await self.geography.covers(
                    lender.lender_id,
                    program.program_id,
                    program.program_version,
                    state_code,
                    metro_id,
                )
                if not covered:
                    report.rejections.append(
                        RejectedProgram(
                            lender=lender,
                            program=program,
                            stage=REJECTED_BY_GEOGRAPHY,
                            reasons=[self._coverage_reason(state_code, metro_id)],
                        )
                    )
                    continue

                criteria = await self.store.list_criteria(program.program_id, program.program_version)
                evaluation = self.evaluator.evaluate(scenario, program, criteria)
                if not evaluation.passed:
                    report.rejections.append(
                        RejectedProgram(
                            lender=lender,
                            program=program,
                            stage=REJECTED_BY_CRITERIA,
                            reasons=[r.reason for r in evaluation.hard_failures],
                        )
                    )
                    continue

                score = self.scorer.score(
                    evaluation,
                    state_code=state_code,
                    loan_amount=self._decimal_attribute(scenario, "loan_amount"),
                )

                rows = await self.store.list_pricing_rows(program.program_id, program.program_version)
                pricing = self.pricing_resolver.resolve(rows, ltv, dscr)

                report.matches.append(
                    RankedMatch(
                        lender=lender,
                        program=program,
                        evaluation=evaluation,
                        score=score,
                        pricing=pricing,
                    )
                )

        report.matches.sort(key=lambda m: m.sort_key())

        logger.info(
            f"Matched scenario against {report.programs_evaluated} programs from "
            f"{report.lenders_evaluated} lenders: {len(report.matches)} matches, "
            f"{len(report.rejections)} rejected"
        )
        return report

    @staticmethod
    def _state_code(scenario: Mapping[str, Any]) -> Optional[str]:
        state = scenario.get("state")
        if isinstance(state, str) and state.strip():
            return state.strip().upper()
        return None

    @staticmethod
    def _metro_id(scenario: Mapping[str, Any]) -> Optional[uuid.UUID]:
        raw = scenario.get("metro_id")
        if raw is None or isinstance(raw, uuid.UUID):
            return raw
        try:
            return uuid.UUID(str(raw))
        except ValueError:
            logger.warning(f"Ignoring malformed metro_id {raw!r}")
            return None

    def _decimal_attribute(self, scenario: Mapping[str, Any], name: str) -> Optional[Decimal]:
        raw = scenario.get(name)
        if raw is None:
            return None
        try:
            return self.registry.coerce(CriterionDataType.DECIMAL, raw)
        except TypeCoercionError:
            return None

    @staticmethod
    def _coverage_reason(state_code: Optional[str], metro_id: Optional[uuid.UUID]) -> str:
        if state_code is None:
            return "Scenario has no state and the lender is not nationwide"
        if metro_id is not None:
            return f"Does not cover {state_code} or the scenario's metro"
        return f"Does not operate in {state_code}"
