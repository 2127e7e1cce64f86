"""Scenario intake and matching endpoints."""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from lendermatch.core.exceptions import ReferenceDataUnavailable
from lendermatch.deps import get_match_service, get_scenario_repository
from lendermatch.models.domain.scenario import Scenario
from lendermatch.models.schemas.match import MatchRequest, ScenarioMatchResponse
from lendermatch.models.schemas.scenario import ScenarioCreate, ScenarioResponse
from lendermatch.repositories.scenario_repository import ScenarioRepository
from lendermatch.services.scenario_match_service import ScenarioMatchService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=ScenarioResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a loan scenario",
    description="Store a borrower loan scenario for matching",
)
async def create_scenario(
    scenario_data: ScenarioCreate,
    repo: Annotated[ScenarioRepository, Depends(get_scenario_repository)],
) -> ScenarioResponse:
    """
    Create a new scenario.

    loan_data may be nested (borrower/property/loan) and camelCase or snake_case.
    """
    try:
        scenario = await repo.create(**scenario_data.model_dump())
        return ScenarioResponse.model_validate(scenario)
    except Exception as e:
        logger.error(f"Error creating scenario: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create scenario",
        )


@router.get(
    "/",
    response_model=list[ScenarioResponse],
    summary="List scenarios",
    description="Retrieve scenarios, newest first",
)
async def list_scenarios(
    repo: Annotated[ScenarioRepository, Depends(get_scenario_repository)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[ScenarioResponse]:
    """List stored scenarios with pagination."""
    scenarios = await repo.get_all(skip=skip, limit=limit, order_by=Scenario.created_at.desc())
    return [ScenarioResponse.model_validate(s) for s in scenarios]


@router.get(
    "/{scenario_id}",
    response_model=ScenarioResponse,
    summary="Get scenario by ID",
)
async def get_scenario(
    scenario_id: UUID,
    repo: Annotated[ScenarioRepository, Depends(get_scenario_repository)],
) -> ScenarioResponse:
    """Retrieve a scenario by ID."""
    scenario = await repo.get_by_id(scenario_id)

    if not scenario:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Scenario with ID {scenario_id} not found",
        )

    return ScenarioResponse.model_validate(scenario)


@router.post(
    "/{scenario_id}/match",
    response_model=ScenarioMatchResponse,
    summary="Match a scenario to lender programs",
    description="Evaluate a scenario against every active lender program and rank the matches",
)
async def match_scenario(
    scenario_id: UUID,
    service: Annotated[ScenarioMatchService, Depends(get_match_service)],
    request: Annotated[Optional[MatchRequest], Body()] = None,
) -> ScenarioMatchResponse:
    """
    Match a scenario.

    Returns lenders with their qualifying programs, best first. A scenario
    that matches nothing yields an empty list, not an error. SOFT programs
    are dropped when includeSoftMatches is false; rejected programs are
    reported only when includeRejected is true.
    """
    options = request or MatchRequest()

    try:
        result = await service.match_scenario(
            scenario_id,
            include_soft_matches=options.include_soft_matches,
            include_rejected=options.include_rejected,
        )
    except ReferenceDataUnavailable:
        raise
    except ValueError as e:
        logger.error(f"Validation error matching scenario {scenario_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error matching scenario {scenario_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to match scenario",
        )

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Scenario with ID {scenario_id} not found",
        )

    return result
