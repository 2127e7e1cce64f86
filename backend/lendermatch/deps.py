"""Dependency injection for FastAPI endpoints."""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lendermatch.config import settings
from lendermatch.db.session import get_db
from lendermatch.repositories.lender_repository import LenderRepository
from lendermatch.repositories.scenario_repository import ScenarioRepository
from lendermatch.services.matching.cache import CachedReferenceDataStore, ReferenceDataCache
from lendermatch.services.matching.matcher import MatchingService
from lendermatch.services.scenario_match_service import ScenarioMatchService

__all__ = [
    "get_db",
    "get_lender_repository",
    "get_match_service",
    "get_scenario_repository",
    "get_session",
    "reference_cache",
]

# Shared across requests; each request wraps its own session-bound repository
reference_cache = ReferenceDataCache(
    maxsize=settings.MATCH_CACHE_MAXSIZE,
    ttl=settings.MATCH_CACHE_TTL_SECONDS,
)


# Re-export get_db for convenience
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session dependency.

    This is an alias for get_db for clarity in endpoint signatures.
    """
    async for session in get_db():
        yield session


async def get_match_service(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScenarioMatchService:
    """Scenario match service over the cached lender repository."""
    store = CachedReferenceDataStore(LenderRepository(db), reference_cache)
    return ScenarioMatchService(
        scenarios=ScenarioRepository(db),
        matching=MatchingService(store),
    )


async def get_lender_repository(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> LenderRepository:
    return LenderRepository(db)


async def get_scenario_repository(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScenarioRepository:
    return ScenarioRepository(db)
