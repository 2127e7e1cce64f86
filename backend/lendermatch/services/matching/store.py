"""Reference-data contract consumed by the matching engine."""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import List, Sequence

from lendermatch.models.domain.lender import (
    Lender,
    LenderState,
    Metro,
    PricingMatrixRow,
    Program,
    ProgramCriterion,
    ProgramMetro,
)


class ReferenceDataStore(ABC):
    """
    Read-only source of lenders, programs and their per-version reference rows.

    Implementations raise ReferenceDataUnavailable when the backing store
    cannot be reached. Program-scoped lookups always take the exact
    (program_id, program_version) pair.
    """

    @abstractmethod
    async def list_active_lenders(self) -> Sequence[Lender]:
        """Active lenders ordered by name."""

    @abstractmethod
    async def list_active_programs(self, lender_id: uuid.UUID, as_of: date) -> Sequence[Program]:
        """Program versions of a lender that are active and valid on as_of."""

    @abstractmethod
    async def list_criteria(
        self, program_id: uuid.UUID, program_version: int
    ) -> Sequence[ProgramCriterion]:
        """Criteria attached to one program version."""

    @abstractmethod
    async def list_lender_states(self, lender_id: uuid.UUID) -> Sequence[LenderState]:
        """Explicit state coverage rows of a lender (empty means nationwide)."""

    @abstractmethod
    async def list_program_metros(
        self, program_id: uuid.UUID, program_version: int
    ) -> Sequence[ProgramMetro]:
        """Metro overrides of one program version."""

    @abstractmethod
    async def list_pricing_rows(
        self, program_id: uuid.UUID, program_version: int
    ) -> Sequence[PricingMatrixRow]:
        """Pricing matrix rows of one program version."""


@dataclass
class ReferenceData:
    """A complete, detached set of reference rows."""

    lenders: List[Lender] = field(default_factory=list)
    lender_states: List[LenderState] = field(default_factory=list)
    metros: List[Metro] = field(default_factory=list)
    programs: List[Program] = field(default_factory=list)
    criteria: List[ProgramCriterion] = field(default_factory=list)
    program_metros: List[ProgramMetro] = field(default_factory=list)
    pricing_rows: List[PricingMatrixRow] = field(default_factory=list)

    def all_rows(self) -> list:
        """Every row in foreign-key insertion order."""
        return [
            *self.lenders,
            *self.lender_states,
            *self.metros,
            *self.programs,
            *self.criteria,
            *self.program_metros,
            *self.pricing_rows,
        ]


class InMemoryReferenceDataStore(ReferenceDataStore):
    """ReferenceDataStore over detached model instances held in memory."""

    def __init__(self, data: ReferenceData):
        self.data = data

    async def list_active_lenders(self) -> Sequence[Lender]:
        return sorted(
            (lender for lender in self.data.lenders if lender.active),
            key=lambda lender: lender.name,
        )

    async def list_active_programs(self, lender_id: uuid.UUID, as_of: date) -> Sequence[Program]:
        return sorted(
            (
                program
                for program in self.data.programs
                if program.lender_id == lender_id and program.is_available_on(as_of)
            ),
            key=lambda program: (program.name, program.program_version),
        )

    async def list_criteria(
        self, program_id: uuid.UUID, program_version: int
    ) -> Sequence[ProgramCriterion]:
        return [
            criterion
            for criterion in self.data.criteria
            if criterion.program_id == program_id and criterion.program_version == program_version
        ]

    async def list_lender_states(self, lender_id: uuid.UUID) -> Sequence[LenderState]:
        return [row for row in self.data.lender_states if row.lender_id == lender_id]

    async def list_program_metros(
        self, program_id: uuid.UUID, program_version: int
    ) -> Sequence[ProgramMetro]:
        return [
            row
            for row in self.data.program_metros
            if row.program_id == program_id and row.program_version == program_version
        ]

    async def list_pricing_rows(
        self, program_id: uuid.UUID, program_version: int
    ) -> Sequence[PricingMatrixRow]:
        return [
            row
            for row in self.data.pricing_rows
            if row.program_id == program_id and row.program_version == program_version
        ]
