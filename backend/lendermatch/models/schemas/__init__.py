"""Pydantic schemas for API validation and serialization."""

from lendermatch.models.schemas.lender import (
    LenderDetailResponse,
    LenderListResponse,
    LenderResponse,
    ProgramCriterionResponse,
    ProgramResponse,
)
from lendermatch.models.schemas.match import (
    LenderMatchResponse,
    MatchingProgramResponse,
    MatchRequest,
    PricingTierResponse,
    RejectedProgramResponse,
    ScenarioMatchResponse,
)
from lendermatch.models.schemas.scenario import ScenarioCreate, ScenarioResponse

__all__ = [
    # Lender schemas
    "LenderResponse",
    "LenderDetailResponse",
    "LenderListResponse",
    "ProgramResponse",
    "ProgramCriterionResponse",
    # Match schemas
    "MatchRequest",
    "PricingTierResponse",
    "MatchingProgramResponse",
    "LenderMatchResponse",
    "RejectedProgramResponse",
    "ScenarioMatchResponse",
    # Scenario schemas
    "ScenarioCreate",
    "ScenarioResponse",
]
