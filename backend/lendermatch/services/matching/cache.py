"""Read-through TTL cache in front of a ReferenceDataStore."""

import logging
import threading
import uuid
from datetime import date
from typing import Any, Optional, Sequence

from cachetools import TTLCache
from cachetools.keys import hashkey

from lendermatch.models.domain.lender import (
    Lender,
    LenderState,
    PricingMatrixRow,
    Program,
    ProgramCriterion,
    ProgramMetro,
)
from lendermatch.services.matching.store import ReferenceDataStore

logger = logging.getLogger(__name__)

_MISSING = object()


class ReferenceDataCache:
    """
    Thread-safe TTL cache shared by every CachedReferenceDataStore.

    Lives for the whole process while the stores it backs are created
    per request around a fresh database session.
    """

    def __init__(self, maxsize: int = 1024, ttl: float = 300):
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.RLock()

    def get(self, key: Any) -> Any:
        with self._lock:
            return self._cache.get(key, _MISSING)

    def set(self, key: Any, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    def invalidate(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._cache.clear()
        logger.info("Reference data cache invalidated")

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class CachedReferenceDataStore(ReferenceDataStore):
    """
    Caches every ReferenceDataStore lookup by method name and arguments.

    Program-scoped keys include the program version, so a new version is
    a cache miss without any invalidation. Edits to an existing version
    are picked up after the TTL expires or on invalidate(). Failed loads
    are not cached.
    """

    def __init__(self, store: ReferenceDataStore, cache: Optional[ReferenceDataCache] = None):
        self.store = store
        self.cache = cache if cache is not None else ReferenceDataCache()

    async def _get(self, method: str, *args: Any) -> Sequence[Any]:
        cache_key = hashkey(method, *args)
        cached = self.cache.get(cache_key)
        if cached is not _MISSING:
            return cached

        logger.debug(f"Reference data cache miss: {method}{args}")
        value = tuple(await getattr(self.store, method)(*args))
        self.cache.set(cache_key, value)
        return value

    def invalidate(self) -> None:
        """Drop every cached entry, for this store and all others sharing the cache."""
        self.cache.invalidate()

    async def list_active_lenders(self) -> Sequence[Lender]:
        return await self._get("list_active_lenders")

    async def list_active_programs(self, lender_id: uuid.UUID, as_of: date) -> Sequence[Program]:
        return await self._get("list_active_programs", lender_id, as_of)

    async def list_criteria(
        self, program_id: uuid.UUID, program_version: int
    ) -> Sequence[ProgramCriterion]:
        return await self._get("list_criteria", program_id, program_version)

    async def list_lender_states(self, lender_id: uuid.UUID) -> Sequence[LenderState]:
        return await self._get("list_lender_states", lender_id)

    async def list_program_metros(
        self, program_id: uuid.UUID, program_version: int
    ) -> Sequence[ProgramMetro]:
        return await self._get("list_program_metros", program_id, program_version)

    async def list_pricing_rows(
        self, program_id: uuid.UUID, program_version: int
    ) -> Sequence[PricingMatrixRow]:
        return await self._get("list_pricing_rows", program_id, program_version)
