"""Pydantic schemas for loan scenarios."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from lendermatch.core.enums import ScenarioStatus


class ScenarioBase(BaseModel):
    """Base schema for scenario with common fields."""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    external_id: Optional[str] = Field(None, max_length=100)
    loan_data: dict[str, Any] = Field(
        default_factory=dict,
        description=(
            "Borrower, property and loan attributes, e.g. "
            "{'borrower': {'creditScore': 720}, 'property': {'state': 'TX'}, 'loan': {'loanAmount': 595000}}"
        ),
    )


class ScenarioCreate(ScenarioBase):
    """Schema for creating a scenario."""

    created_by: Optional[str] = Field(None, max_length=100)


class ScenarioResponse(ScenarioBase):
    """Schema for scenario response."""

    id: UUID
    status: ScenarioStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
