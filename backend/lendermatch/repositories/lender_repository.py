"""Repository for lender reference data used by the matching engine."""

import logging
from datetime import date
from typing import Any, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lendermatch.core.exceptions import ReferenceDataUnavailable
from lendermatch.models.domain.lender import (
    Lender,
    LenderState,
    PricingMatrixRow,
    Program,
    ProgramCriterion,
    ProgramMetro,
)
from lendermatch.repositories.base import BaseRepository
from lendermatch.services.matching.store import ReferenceDataStore

logger = logging.getLogger(__name__)


class LenderRepository(BaseRepository[Lender], ReferenceDataStore):
    """
    Repository for Lender and its per-program-version reference rows.

    Implements ReferenceDataStore over PostgreSQL. Database failures in
    the store methods are raised as ReferenceDataUnavailable.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the lender repository.

        Args:
            db: Async database session
        """
        super().__init__(Lender, db)

    async def _fetch_all(self, stmt: Any) -> List[Any]:
        try:
            result = await self.db.execute(stmt)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Reference data query failed: {str(e)}", exc_info=True)
            raise ReferenceDataUnavailable("Reference data store is unavailable") from e
        return list(result.scalars().all())

    # ===== ReferenceDataStore =====

    async def list_active_lenders(self) -> Sequence[Lender]:
        stmt = select(Lender).where(Lender.active == True).order_by(Lender.name)
        return await self._fetch_all(stmt)

    async def list_active_programs(self, lender_id: UUID, as_of: date) -> Sequence[Program]:
        stmt = (
            select(Program)
            .where(
                Program.lender_id == lender_id,
                Program.active == True,
                or_(Program.valid_from.is_(None), Program.valid_from <= as_of),
                or_(Program.valid_to.is_(None), Program.valid_to >= as_of),
            )
            .order_by(Program.name, Program.program_version)
        )
        return await self._fetch_all(stmt)

    async def list_criteria(
        self, program_id: UUID, program_version: int
    ) -> Sequence[ProgramCriterion]:
        stmt = (
            select(ProgramCriterion)
            .where(
                ProgramCriterion.program_id == program_id,
                ProgramCriterion.program_version == program_version,
            )
            .order_by(ProgramCriterion.name)
        )
        return await self._fetch_all(stmt)

    async def list_lender_states(self, lender_id: UUID) -> Sequence[LenderState]:
        stmt = (
            select(LenderState)
            .where(LenderState.lender_id == lender_id)
            .order_by(LenderState.state_code)
        )
        return await self._fetch_all(stmt)

    async def list_program_metros(
        self, program_id: UUID, program_version: int
    ) -> Sequence[ProgramMetro]:
        stmt = select(ProgramMetro).where(
            ProgramMetro.program_id == program_id,
            ProgramMetro.program_version == program_version,
        )
        return await self._fetch_all(stmt)

    async def list_pricing_rows(
        self, program_id: UUID, program_version: int
    ) -> Sequence[PricingMatrixRow]:
        stmt = select(PricingMatrixRow).where(
            PricingMatrixRow.program_id == program_id,
            PricingMatrixRow.program_version == program_version,
        )
        return await self._fetch_all(stmt)

    # ===== Lender views =====

    async def get_by_name(self, name: str) -> Optional[Lender]:
        """
        Retrieve a lender by name.

        Args:
            name: Lender name (case-sensitive)

        Returns:
            The lender if found, None otherwise
        """
        stmt = select(Lender).where(Lender.name == name)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_lenders(
        self,
        active_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Lender]:
        """
        Retrieve lenders with state coverage loaded.

        Args:
            active_only: Only return active lenders
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return

        Returns:
            Lenders ordered by name
        """
        stmt = select(Lender).options(selectinload(Lender.states)).order_by(Lender.name)
        if active_only:
            stmt = stmt.where(Lender.active == True)
        stmt = stmt.offset(skip).limit(limit)
        return await self._fetch_all(stmt)

    async def count_lenders(self, active_only: bool = False) -> int:
        if active_only:
            return await self.count(Lender.active == True)
        return await self.count()

    async def get_with_programs(self, lender_id: UUID) -> Optional[Lender]:
        """
        Retrieve a lender with its program versions and state coverage.

        Args:
            lender_id: UUID of the lender

        Returns:
            The lender if found, None otherwise
        """
        stmt = (
            select(Lender)
            .where(Lender.lender_id == lender_id)
            .options(
                selectinload(Lender.programs).selectinload(Program.criteria),
                selectinload(Lender.states),
            )
        )
        rows = await self._fetch_all(stmt)
        return rows[0] if rows else None
