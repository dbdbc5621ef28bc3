"""Tests for query identities and the session query cache."""

import asyncio

import pytest

from ctscan_library.cache import ALL_SCANS
from ctscan_library.cache import SCAN_PREFIX
from ctscan_library.cache import QueryCache
from ctscan_library.cache import QueryKey
from ctscan_library.cache import QueryStatus
from ctscan_library.cache import scan_key
from ctscan_library.errors import SessionClosedError


class CountingFetcher:
    """Fetcher that counts calls and optionally waits on a gate."""

    def __init__(self, value: object = "value", gate: asyncio.Event | None = None) -> None:
        self.value = value
        self.gate = gate
        self.calls = 0

    async def __call__(self) -> object:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        return self.value


@pytest.mark.unit
class TestQueryKey:
    """Test identity derivation."""

    def test_same_arguments_same_identity(self) -> None:
        assert scan_key(42) == scan_key(42)
        assert hash(scan_key(42)) == hash(scan_key(42))

    def test_arguments_normalized_to_strings(self) -> None:
        assert scan_key(42) == scan_key("42")
        assert scan_key(42).parts == ("scan", "42")

    def test_different_arguments_different_identity(self) -> None:
        assert scan_key(1) != scan_key(2)

    def test_prefix_matching(self) -> None:
        assert scan_key(7).matches(SCAN_PREFIX)
        assert not ALL_SCANS.matches(SCAN_PREFIX)
        assert ALL_SCANS.matches(ALL_SCANS)

    def test_str(self) -> None:
        assert str(scan_key(3)) == "scan/3"


class TestQueryCacheFetch:
    """Test caching and de-duplication."""

    async def test_first_fetch_calls_fetcher(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher()

        state = await cache.fetch(ALL_SCANS, fetcher)

        assert state.status == QueryStatus.SUCCESS
        assert state.data == "value"
        assert state.fetch_count == 1
        assert fetcher.calls == 1

    async def test_cached_value_reused(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher()

        await cache.fetch(scan_key(42), fetcher)
        state = await cache.fetch(QueryKey.of("scan", "42"), fetcher)

        assert state.data == "value"
        assert fetcher.calls == 1

    async def test_concurrent_fetches_share_one_call(self) -> None:
        cache = QueryCache()
        gate = asyncio.Event()
        fetcher = CountingFetcher(gate=gate)

        first = asyncio.create_task(cache.fetch(scan_key(42), fetcher))
        second = asyncio.create_task(cache.fetch(scan_key(42), fetcher))
        await asyncio.sleep(0)

        assert cache.is_in_flight(scan_key(42))
        gate.set()
        results = await asyncio.gather(first, second)

        assert fetcher.calls == 1
        assert [r.data for r in results] == ["value", "value"]
        assert not cache.is_in_flight(scan_key(42))

    async def test_failure_cached_without_retry(self) -> None:
        cache = QueryCache()
        calls = 0

        async def failing() -> None:
            nonlocal calls
            calls += 1
            raise RuntimeError("backend down")

        first = await cache.fetch(ALL_SCANS, failing)
        second = await cache.fetch(ALL_SCANS, failing)

        assert first.status == QueryStatus.ERROR
        assert str(first.error) == "backend down"
        assert second.status == QueryStatus.ERROR
        assert calls == 1

    async def test_snapshots_are_copies(self) -> None:
        cache = QueryCache()
        state = await cache.fetch(ALL_SCANS, CountingFetcher())
        state.is_stale = True

        assert cache.get_state(ALL_SCANS).is_stale is False

    async def test_list_data_not_shared_with_callers(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher(value=["scan-1"])
        first = await cache.fetch(ALL_SCANS, fetcher)
        first.data.append("scan-2")

        second = await cache.fetch(ALL_SCANS, fetcher)

        assert second.data == ["scan-1"]
        assert cache.get_state(ALL_SCANS).data == ["scan-1"]
        assert fetcher.calls == 1


class TestQueryCacheInvalidation:
    """Test invalidation rules."""

    async def test_invalidate_forces_refetch(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher()
        await cache.fetch(ALL_SCANS, fetcher)

        assert cache.invalidate(ALL_SCANS) == 1
        assert cache.get_state(ALL_SCANS).is_stale is True

        state = await cache.fetch(ALL_SCANS, fetcher)
        assert fetcher.calls == 2
        assert state.is_stale is False

    async def test_prefix_invalidates_every_scan_entry(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher()
        for scan_id in (1, 2, 3):
            await cache.fetch(scan_key(scan_id), fetcher)
        await cache.fetch(ALL_SCANS, fetcher)

        assert cache.invalidate(SCAN_PREFIX) == 3
        assert cache.get_state(ALL_SCANS).is_stale is False
        assert all(cache.get_state(scan_key(i)).is_stale for i in (1, 2, 3))

    async def test_invalidate_unknown_prefix_is_noop(self) -> None:
        cache = QueryCache()
        assert cache.invalidate(QueryKey.of("nothing")) == 0

    async def test_invalidate_detaches_in_flight_call(self) -> None:
        cache = QueryCache()
        gate = asyncio.Event()
        fetcher = CountingFetcher(gate=gate)

        first = asyncio.create_task(cache.fetch(ALL_SCANS, fetcher))
        await asyncio.sleep(0)
        cache.invalidate(ALL_SCANS)
        second = asyncio.create_task(cache.fetch(ALL_SCANS, fetcher))
        await asyncio.sleep(0)

        gate.set()
        old, new = await asyncio.gather(first, second)

        assert fetcher.calls == 2
        assert old.is_stale is True
        assert new.is_stale is False
        assert cache.get_state(ALL_SCANS).is_stale is False


class TestQueryCacheLifecycle:
    """Test clear/close."""

    async def test_clear_drops_entries(self) -> None:
        cache = QueryCache()
        await cache.fetch(ALL_SCANS, CountingFetcher())

        cache.clear()

        assert cache.keys() == []
        assert cache.get_state(ALL_SCANS) is None

    async def test_closed_cache_rejects_use(self) -> None:
        cache = QueryCache()
        cache.close()

        assert cache.closed
        with pytest.raises(SessionClosedError):
            await cache.fetch(ALL_SCANS, CountingFetcher())
        with pytest.raises(SessionClosedError):
            cache.invalidate(ALL_SCANS)

    async def test_result_landing_after_close_is_discarded(self) -> None:
        cache = QueryCache()
        gate = asyncio.Event()
        task = asyncio.create_task(cache.fetch(ALL_SCANS, CountingFetcher(gate=gate)))
        await asyncio.sleep(0)

        cache.close()
        gate.set()
        state = await task

        assert state.data == "value"
        assert cache.keys() == []
