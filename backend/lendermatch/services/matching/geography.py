"""Geographic coverage: lender state rows and program metro overrides."""

import uuid
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from lendermatch.services.matching.store import ReferenceDataStore


@dataclass(frozen=True)
class CoverageMode:
    """
    Where a lender operates.

    Derived once from the lender's state rows: no rows means nationwide,
    any rows restrict coverage to exactly those states.

    Attributes:
        states: Upper-cased state codes, or None for nationwide coverage
    """

    states: Optional[FrozenSet[str]] = None

    @classmethod
    def nationwide(cls) -> "CoverageMode":
        return cls(states=None)

    @classmethod
    def restricted(cls, states: Iterable[str]) -> "CoverageMode":
        return cls(states=frozenset(code.strip().upper() for code in states))

    @classmethod
    def from_state_codes(cls, states: Iterable[str]) -> "CoverageMode":
        """Nationwide when the iterable is empty, restricted otherwise."""
        codes = list(states)
        if not codes:
            return cls.nationwide()
        return cls.restricted(codes)

    @property
    def is_nationwide(self) -> bool:
        return self.states is None

    def includes(self, state_code: Optional[str]) -> bool:
        """Whether a state is covered. Without a state only nationwide coverage applies."""
        if self.states is None:
            return True
        if not state_code:
            return False
        return state_code.strip().upper() in self.states


class GeographicCoverageResolver:
    """
    Decides whether a lender/program version covers a scenario's location.

    Precedence:
    1. A program version with metro overrides, evaluated for a scenario
       with a known metro, is covered iff that metro is in the override set.
    2. Otherwise the lender's CoverageMode decides on the state code.
    """

    def __init__(self, store: ReferenceDataStore):
        self.store = store

    async def coverage_for(self, lender_id: uuid.UUID) -> CoverageMode:
        """Derive the lender's coverage mode from its state rows."""
        rows = await self.store.list_lender_states(lender_id)
        return CoverageMode.from_state_codes(row.state_code for row in rows)

    async def covers(
        self,
        lender_id: uuid.UUID,
        program_id: uuid.UUID,
        program_version: int,
        state_code: Optional[str],
        metro_id: Optional[uuid.UUID] = None,
    ) -> bool:
        """
        Check whether a program version covers a scenario location.

        Args:
            lender_id: Owning lender
            program_id: Program identity
            program_version: Exact program version being evaluated
            state_code: Scenario state code (two letters, any case)
            metro_id: Scenario metro, if known

        Returns:
            True if the location is covered
        """
        if metro_id is not None:
            overrides = await self.store.list_program_metros(program_id, program_version)
            if overrides:
                return any(row.metro_id == metro_id for row in overrides)

        mode = await self.coverage_for(lender_id)
        return mode.includes(state_code)
