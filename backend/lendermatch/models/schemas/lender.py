"""Pydantic schemas for lender reference data views."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from lendermatch.core.enums import CriterionDataType


# ==================== Criterion Schemas ====================


class ProgramCriterionResponse(BaseModel):
    """Schema for a program criterion."""

    criterion_id: UUID
    name: str
    data_type: CriterionDataType
    hard_min: Optional[Decimal] = None
    hard_max: Optional[Decimal] = None
    soft_min: Optional[Decimal] = None
    soft_max: Optional[Decimal] = None
    enum_values: Optional[list[str]] = None
    bool_value: Optional[bool] = None
    required_flag: bool
    active: bool

    model_config = ConfigDict(from_attributes=True)


# ==================== Program Schemas ====================


class ProgramResponse(BaseModel):
    """Schema for one program version."""

    program_id: UUID
    program_version: int
    name: str
    product_type: str
    active: bool
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    criteria: list[ProgramCriterionResponse] = []

    model_config = ConfigDict(from_attributes=True)


# ==================== Lender Schemas ====================


class LenderResponse(BaseModel):
    """Schema for lender response."""

    lender_id: UUID
    name: str
    active: bool
    profile_score: Optional[Decimal] = Field(None, ge=0, le=100)
    website_url: Optional[str] = None
    notes: Optional[str] = None
    coverage: Literal["nationwide", "restricted"]
    states: list[str] = Field(default_factory=list, description="Covered state codes when restricted")
    created_at: datetime
    updated_at: datetime


class LenderDetailResponse(LenderResponse):
    """Schema for lender response with program versions."""

    programs: list[ProgramResponse] = []


class LenderListResponse(BaseModel):
    """Schema for list of lenders."""

    items: list[LenderResponse]
    total: int
