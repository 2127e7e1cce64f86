"""Domain models for the application."""

from lendermatch.models.domain.lender import (
    Lender,
    LenderState,
    Metro,
    PricingMatrixRow,
    Program,
    ProgramCriterion,
    ProgramMetro,
)
from lendermatch.models.domain.scenario import Scenario

__all__ = [
    "Lender",
    "LenderState",
    "Metro",
    "PricingMatrixRow",
    "Program",
    "ProgramCriterion",
    "ProgramMetro",
    "Scenario",
]
