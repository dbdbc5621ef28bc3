"""Identity-keyed query cache with in-flight de-duplication.

Contract:
- Inputs: QueryKey identities and async fetchers
- Outputs: QueryState snapshots
- Side Effects: Calls fetchers; owns all cached state for one session

One QueryCache exists per ClientSession. Nothing outside the orchestrator
writes to it; values change only through fetches, and only invalidation
makes a fresh value eligible to be fetched again.
"""

import asyncio
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from datetime import UTC
from datetime import datetime
from typing import Any

from ..errors import SessionClosedError
from .keys import QueryKey
from .models import QueryState
from .models import QueryStatus

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]


def _snapshot(state: QueryState) -> QueryState:
    """Copy of state for callers, with list data copied too."""
    data = list(state.data) if isinstance(state.data, list) else state.data
    return replace(state, data=data)


@dataclass
class _Entry:
    state: QueryState = field(default_factory=QueryState)
    # Bumped by invalidate(); a fetch that started on an older generation lands stale
    generation: int = 0
    # Generation of the fetch that produced state; older results never overwrite it
    settled_generation: int = 0


class QueryCache:
    """Session-scoped store of query results."""

    def __init__(self) -> None:
        self._entries: dict[QueryKey, _Entry] = {}
        self._in_flight: dict[QueryKey, asyncio.Task[QueryState]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Query cache has been closed")

    async def fetch(self, key: QueryKey, fetcher: Fetcher) -> QueryState:
        """Resolve a query identity.

        Serves a fresh cached entry without calling fetcher. Otherwise joins
        the in-flight call for key, or starts exactly one.

        Args:
            key: Query identity
            fetcher: Coroutine factory performing the remote call

        Returns:
            Snapshot of the entry after the fetch settles

        Raises:
            SessionClosedError: If the cache was closed
        """
        self._ensure_open()

        entry = self._entries.get(key)
        if entry is not None and entry.state.is_fresh:
            logger.debug(f"Cache hit: {key}")
            return _snapshot(entry.state)

        task = self._in_flight.get(key)
        if task is None:
            entry = self._entries.setdefault(key, _Entry())
            task = asyncio.ensure_future(self._run(key, entry, entry.generation, fetcher))
            self._in_flight[key] = task
        else:
            logger.debug(f"Joining in-flight fetch: {key}")

        return _snapshot(await asyncio.shield(task))

    async def _run(self, key: QueryKey, entry: _Entry, generation: int, fetcher: Fetcher) -> QueryState:
        if entry.state.status == QueryStatus.IDLE:
            entry.state.status = QueryStatus.PENDING

        try:
            data = await fetcher()
            outcome = QueryState(status=QueryStatus.SUCCESS, data=data)
        except Exception as e:
            logger.warning(f"Query {key} failed: {e}")
            outcome = QueryState(status=QueryStatus.ERROR, data=entry.state.data, error=e)
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

        outcome.updated_at = datetime.now(UTC)
        outcome.fetch_count = entry.state.fetch_count + 1
        outcome.is_stale = entry.generation != generation

        if self._closed or self._entries.get(key) is not entry:
            logger.debug(f"Discarding result for dropped entry: {key}")
            return outcome
        if generation < entry.settled_generation:
            logger.debug(f"Discarding result superseded by a newer fetch: {key}")
            return outcome

        entry.state = outcome
        entry.settled_generation = generation
        return _snapshot(outcome)

    def get_state(self, key: QueryKey) -> QueryState | None:
        """Current snapshot for key, or None if never requested."""
        self._ensure_open()
        entry = self._entries.get(key)
        return _snapshot(entry.state) if entry is not None else None

    def is_in_flight(self, key: QueryKey) -> bool:
        return key in self._in_flight

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every identity starting with prefix stale.

        In-flight calls for matching keys are detached: their awaiters still
        get a result, but the next read issues a fresh call.

        Args:
            prefix: Key or key prefix, e.g. SCAN_PREFIX for all scan-by-id entries

        Returns:
            Number of entries invalidated
        """
        self._ensure_open()
        count = 0
        for key, entry in self._entries.items():
            if not key.matches(prefix):
                continue
            entry.generation += 1
            entry.state.is_stale = True
            self._in_flight.pop(key, None)
            count += 1
        logger.debug(f"Invalidated {count} entries for prefix {prefix}")
        return count

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def clear(self) -> None:
        """Drop every entry. In-flight calls finish but their results are discarded."""
        self._entries.clear()
        self._in_flight.clear()
        logger.info("Query cache cleared")

    def close(self) -> None:
        """Clear and reject further use."""
        self.clear()
        self._closed = True
