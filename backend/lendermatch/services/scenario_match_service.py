"""Scenario matching service backing the match endpoint."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol
from uuid import UUID

from lendermatch.config import settings
from lendermatch.core.enums import MatchType
from lendermatch.models.schemas.match import (
    LenderMatchResponse,
    MatchingProgramResponse,
    PricingTierResponse,
    RejectedProgramResponse,
    ScenarioMatchResponse,
)
from lendermatch.services.matching.matcher import MatchingService, RankedMatch, RejectedProgram

logger = logging.getLogger(__name__)


class ScenarioLookup(Protocol):
    """Anything that can produce a scenario's named attribute map."""

    async def get_attributes(self, scenario_id: UUID) -> Optional[Dict[str, Any]]:
        ...


class ScenarioMatchService:
    """
    Matches a stored scenario and shapes the result per lender.

    A program is reported as SOFT when it missed at least one soft
    preference and scored below the configured threshold, HARD otherwise.
    """

    def __init__(
        self,
        scenarios: ScenarioLookup,
        matching: MatchingService,
        soft_match_threshold: Optional[Decimal] = None,
    ):
        """
        Initialize the scenario match service.

        Args:
            scenarios: Scenario attribute lookup
            matching: Matching engine
            soft_match_threshold: Score below which a soft-missing program is SOFT
        """
        self.scenarios = scenarios
        self.matching = matching
        if soft_match_threshold is None:
            soft_match_threshold = Decimal(settings.SOFT_MATCH_SCORE_THRESHOLD)
        self.soft_match_threshold = soft_match_threshold

    async def match_scenario(
        self,
        scenario_id: UUID,
        include_soft_matches: bool = True,
        include_rejected: bool = False,
        as_of: Optional[date] = None,
    ) -> Optional[ScenarioMatchResponse]:
        """
        Match a scenario against every active lender program.

        Args:
            scenario_id: UUID of the scenario
            include_soft_matches: Keep programs classified as SOFT
            include_rejected: Report rejected programs with their reasons
            as_of: Date programs must be valid on (defaults to today)

        Returns:
            ScenarioMatchResponse, or None if the scenario does not exist

        Raises:
            ReferenceDataUnavailable: If reference data cannot be loaded
        """
        attributes = await self.scenarios.get_attributes(scenario_id)
        if attributes is None:
            return None

        report = await self.matching.evaluate(attributes, as_of=as_of)

        lenders: Dict[UUID, LenderMatchResponse] = {}
        total_matches = 0
        by_product_type: Dict[str, int] = {}
        for match in report.matches:
            match_type = self.classify(match)
            if match_type == MatchType.SOFT and not include_soft_matches:
                continue

            lender_match = lenders.get(match.lender.lender_id)
            if lender_match is None:
                # Matches arrive ranked, so the first program seen is the lender's best
                lender_match = LenderMatchResponse(
                    lender_id=match.lender.lender_id,
                    lender_name=match.lender.name,
                    match_score=match.match_score,
                )
                lenders[match.lender.lender_id] = lender_match

            lender_match.matching_programs.append(self._program_response(match, match_type))
            total_matches += 1
            product_type = match.program.product_type
            by_product_type[product_type] = by_product_type.get(product_type, 0) + 1

        matches = list(lenders.values())
        confidence_score = max((m.match_score for m in matches), default=Decimal("0"))

        rejected: List[RejectedProgramResponse] = []
        if include_rejected:
            rejected = [self._rejected_response(r) for r in report.rejections]

        logger.info(
            f"Scenario {scenario_id}: {total_matches} matching programs across "
            f"{len(matches)} lenders (confidence {confidence_score})"
        )

        return ScenarioMatchResponse(
            scenario_id=scenario_id,
            matches=matches,
            total_matches=total_matches,
            total_lenders=len(matches),
            by_product_type=by_product_type,
            confidence_score=confidence_score,
            rejected_programs=rejected,
        )

    def classify(self, match: RankedMatch) -> MatchType:
        """SOFT when a soft preference was missed and the score is below the threshold."""
        if match.score.has_soft_misses and match.match_score < self.soft_match_threshold:
            return MatchType.SOFT
        return MatchType.HARD

    @staticmethod
    def _program_response(match: RankedMatch, match_type: MatchType) -> MatchingProgramResponse:
        pricing = None
        if match.pricing is not None:
            pricing = PricingTierResponse(
                matrix_id=match.pricing.matrix_id,
                spread_bps=match.pricing.spread_bps,
                ltv_band=match.pricing.ltv_band,
                dscr_band=match.pricing.dscr_band,
            )

        return MatchingProgramResponse(
            program_id=match.program.program_id,
            program_version=match.program.program_version,
            program_name=match.program.name,
            product_type=match.program.product_type,
            match_type=match_type,
            match_score=match.match_score,
            unmet_criteria=list(match.unmet_criteria),
            reasons=list(match.reasons),
            pricing=pricing,
        )

    @staticmethod
    def _rejected_response(rejection: RejectedProgram) -> RejectedProgramResponse:
        return RejectedProgramResponse(
            lender_id=rejection.lender.lender_id,
            lender_name=rejection.lender.name,
            program_id=rejection.program.program_id,
            program_version=rejection.program.program_version,
            program_name=rejection.program.name,
            stage=rejection.stage,
            reasons=list(rejection.reasons),
        )
