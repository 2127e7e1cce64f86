"""Lender reference data endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from lendermatch.deps import get_lender_repository
from lendermatch.models.domain.lender import Lender
from lendermatch.models.schemas.lender import (
    LenderDetailResponse,
    LenderListResponse,
    LenderResponse,
    ProgramResponse,
)
from lendermatch.repositories.lender_repository import LenderRepository
from lendermatch.services.matching.geography import CoverageMode

logger = logging.getLogger(__name__)

router = APIRouter()


def _lender_fields(lender: Lender) -> dict:
    mode = CoverageMode.from_state_codes(row.state_code for row in lender.states)
    return {
        "lender_id": lender.lender_id,
        "name": lender.name,
        "active": lender.active,
        "profile_score": lender.profile_score,
        "website_url": lender.website_url,
        "notes": lender.notes,
        "coverage": "nationwide" if mode.is_nationwide else "restricted",
        "states": sorted(mode.states or []),
        "created_at": lender.created_at,
        "updated_at": lender.updated_at,
    }


@router.get(
    "/",
    response_model=LenderListResponse,
    summary="List lenders",
    description="Retrieve lenders with their state coverage",
)
async def list_lenders(
    repo: Annotated[LenderRepository, Depends(get_lender_repository)],
    active_only: Annotated[
        bool, Query(description="Filter for active lenders only")
    ] = True,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 100,
) -> LenderListResponse:
    """
    List lenders.

    Coverage is "nationwide" for lenders without state rows.
    total counts every matching lender, not just this page.
    """
    lenders = await repo.list_lenders(active_only=active_only, skip=skip, limit=limit)
    items = [LenderResponse(**_lender_fields(lender)) for lender in lenders]
    total = await repo.count_lenders(active_only=active_only)
    return LenderListResponse(items=items, total=total)


@router.get(
    "/{lender_id}",
    response_model=LenderDetailResponse,
    summary="Get lender by ID",
    description="Retrieve a lender with all its program versions and criteria",
)
async def get_lender(
    lender_id: UUID,
    repo: Annotated[LenderRepository, Depends(get_lender_repository)],
) -> LenderDetailResponse:
    """
    Retrieve a lender by ID.

    Returns the lender with every program version and its criteria.
    """
    lender = await repo.get_with_programs(lender_id)

    if not lender:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Lender with ID {lender_id} not found",
        )

    programs = sorted(lender.programs, key=lambda p: (p.name, p.program_version))
    return LenderDetailResponse(
        **_lender_fields(lender),
        programs=[ProgramResponse.model_validate(program) for program in programs],
    )
