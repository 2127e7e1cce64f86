"""Pydantic schemas for the scenario match endpoint (camelCase on the wire)."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lendermatch.core.enums import MatchType


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases, accepting either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MatchRequest(CamelModel):
    """Options for matching a scenario."""

    include_soft_matches: bool = True
    include_rejected: bool = False


class PricingTierResponse(CamelModel):
    """Selected pricing cell."""

    matrix_id: UUID
    spread_bps: int
    ltv_band: str
    dscr_band: str


class MatchingProgramResponse(CamelModel):
    """A program version the scenario qualifies for."""

    program_id: UUID
    program_version: int
    program_name: str
    product_type: str
    match_type: MatchType
    match_score: Decimal = Field(..., ge=0, le=100)
    unmet_criteria: list[str] = []
    reasons: list[str] = []
    pricing: Optional[PricingTierResponse] = None


class LenderMatchResponse(CamelModel):
    """A lender with its qualifying programs."""

    lender_id: UUID
    lender_name: str
    match_score: Decimal = Field(..., ge=0, le=100, description="Best program score")
    matching_programs: list[MatchingProgramResponse] = []


class RejectedProgramResponse(CamelModel):
    """A candidate program the scenario does not qualify for, with reasons."""

    lender_id: UUID
    lender_name: str
    program_id: UUID
    program_version: int
    program_name: str
    stage: str = Field(..., description="'geography' or 'criteria'")
    reasons: list[str] = []


class ScenarioMatchResponse(CamelModel):
    """Ranked match result for one scenario."""

    scenario_id: UUID
    matches: list[LenderMatchResponse] = []
    total_matches: int = 0
    total_lenders: int = 0
    by_product_type: dict[str, int] = Field(
        default_factory=dict, description="Matching program count per product type"
    )
    confidence_score: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    rejected_programs: list[RejectedProgramResponse] = []
