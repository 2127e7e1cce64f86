"""Builders for detached model instances used across tests."""
from decimal import Decimal
from typing import Any, Optional

from lendermatch.core.enums import CriterionDataType
from lendermatch.core.exceptions import ReferenceDataUnavailable
from lendermatch.db.seed_data import seed_id
from lendermatch.models.domain.lender import (
    Lender,
    LenderState,
    PricingMatrixRow,
    Program,
    ProgramCriterion,
)
from lendermatch.services.matching.store import ReferenceDataStore


def make_lender(name: str = "Test Lender", profile_score: Optional[str] = "80", **kwargs: Any) -> Lender:
    fields = {
        "lender_id": seed_id("test-lender", name),
        "name": name,
        "active": True,
        "profile_score": Decimal(profile_score) if profile_score is not None else None,
    }
    fields.update(kwargs)
    return Lender(**fields)


def make_state(lender: Lender, state_code: str) -> LenderState:
    return LenderState(lender_id=lender.lender_id, state_code=state_code)


def make_program(name: str = "Test Program", lender: Optional[Lender] = None, **kwargs: Any) -> Program:
    fields = {
        "program_id": seed_id("test-program", name),
        "program_version": 1,
        "lender_id": lender.lender_id if lender is not None else seed_id("test-lender", "Test Lender"),
        "name": name,
        "product_type": "DSCR",
        "active": True,
    }
    fields.update(kwargs)
    return Program(**fields)


def make_criterion(
    name: str,
    data_type: CriterionDataType = CriterionDataType.DECIMAL,
    hard_min: Optional[str] = None,
    hard_max: Optional[str] = None,
    soft_min: Optional[str] = None,
    soft_max: Optional[str] = None,
    required: bool = True,
    program: Optional[Program] = None,
    **kwargs: Any,
) -> ProgramCriterion:
    program_id = program.program_id if program is not None else seed_id("test-program", "Test Program")
    program_version = program.program_version if program is not None else 1
    fields = {
        "criterion_id": seed_id("test-criterion", str(program_id), str(program_version), name),
        "program_id": program_id,
        "program_version": program_version,
        "name": name,
        "data_type": data_type,
        "hard_min": Decimal(hard_min) if hard_min is not None else None,
        "hard_max": Decimal(hard_max) if hard_max is not None else None,
        "soft_min": Decimal(soft_min) if soft_min is not None else None,
        "soft_max": Decimal(soft_max) if soft_max is not None else None,
        "required_flag": required,
        "active": True,
    }
    fields.update(kwargs)
    return ProgramCriterion(**fields)


def make_pricing_row(
    spread_bps: int, ltv_band: str, dscr_band: str, program: Optional[Program] = None
) -> PricingMatrixRow:
    program_id = program.program_id if program is not None else seed_id("test-program", "Test Program")
    return PricingMatrixRow(
        matrix_id=seed_id("test-pricing", str(program_id), ltv_band, dscr_band),
        program_id=program_id,
        program_version=program.program_version if program is not None else 1,
        spread_bps=spread_bps,
        ltv_band=ltv_band,
        dscr_band=dscr_band,
    )


class FailingStore(ReferenceDataStore):
    """Reference data store whose backing database is down."""

    def __init__(self):
        self.calls = 0

    async def list_active_lenders(self):
        self.calls += 1
        raise ReferenceDataUnavailable("Reference data store is unavailable")

    async def list_active_programs(self, lender_id, as_of):
        return []

    async def list_criteria(self, program_id, program_version):
        return []

    async def list_lender_states(self, lender_id):
        return []

    async def list_program_metros(self, program_id, program_version):
        return []

    async def list_pricing_rows(self, program_id, program_version):
        return []
