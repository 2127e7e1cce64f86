"""Read-through reference data caching."""
import asyncio
import time
from collections import Counter

import pytest

from factories import FailingStore
from lendermatch.core.exceptions import ReferenceDataUnavailable
from lendermatch.services.matching.cache import CachedReferenceDataStore, ReferenceDataCache
from lendermatch.services.matching.matcher import MatchingService
from lendermatch.services.matching.store import InMemoryReferenceDataStore


class CountingStore(InMemoryReferenceDataStore):
    """In-memory store that records every lookup it serves."""

    def __init__(self, data):
        super().__init__(data)
        self.calls = Counter()

    async def list_active_lenders(self):
        self.calls["list_active_lenders"] += 1
        return await super().list_active_lenders()

    async def list_criteria(self, program_id, program_version):
        self.calls["list_criteria"] += 1
        return await super().list_criteria(program_id, program_version)


def test_repeated_matching_hits_the_cache(reference_data, priced_scenario):
    counting = CountingStore(reference_data)
    service = MatchingService(CachedReferenceDataStore(counting, ReferenceDataCache()))

    first = asyncio.run(service.find_matches(priced_scenario))
    calls_after_first = dict(counting.calls)
    second = asyncio.run(service.find_matches(priced_scenario))

    assert dict(counting.calls) == calls_after_first
    assert counting.calls["list_active_lenders"] == 1
    assert [m.program.program_id for m in first] == [m.program.program_id for m in second]


def test_cache_is_shared_between_store_wrappers(reference_data):
    counting = CountingStore(reference_data)
    cache = ReferenceDataCache()

    asyncio.run(CachedReferenceDataStore(counting, cache).list_active_lenders())
    asyncio.run(CachedReferenceDataStore(counting, cache).list_active_lenders())

    assert counting.calls["list_active_lenders"] == 1
    assert len(cache) == 1


def test_program_version_is_part_of_the_key(reference_data):
    counting = CountingStore(reference_data)
    store = CachedReferenceDataStore(counting, ReferenceDataCache())
    program = reference_data.programs[0]

    asyncio.run(store.list_criteria(program.program_id, 1))
    asyncio.run(store.list_criteria(program.program_id, 1))
    asyncio.run(store.list_criteria(program.program_id, 2))

    assert counting.calls["list_criteria"] == 2


def test_invalidate_forces_reload(reference_data):
    counting = CountingStore(reference_data)
    store = CachedReferenceDataStore(counting, ReferenceDataCache())

    asyncio.run(store.list_active_lenders())
    store.invalidate()
    asyncio.run(store.list_active_lenders())

    assert counting.calls["list_active_lenders"] == 2


def test_entries_expire_after_ttl(reference_data):
    counting = CountingStore(reference_data)
    store = CachedReferenceDataStore(counting, ReferenceDataCache(ttl=0.05))

    asyncio.run(store.list_active_lenders())
    time.sleep(0.1)
    asyncio.run(store.list_active_lenders())

    assert counting.calls["list_active_lenders"] == 2


def test_failures_are_not_cached(priced_scenario):
    failing = FailingStore()
    service = MatchingService(CachedReferenceDataStore(failing, ReferenceDataCache()))

    for _ in range(2):
        with pytest.raises(ReferenceDataUnavailable):
            asyncio.run(service.find_matches(priced_scenario))

    assert failing.calls == 2
