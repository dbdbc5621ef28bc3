"""Cache entry state."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class QueryStatus(str, Enum):
    """Lifecycle of one cache entry.

    - IDLE: never fetched
    - PENDING: first fetch in flight, no value yet
    - SUCCESS: holds the latest successful (or degraded) value
    - ERROR: last fetch failed; kept until invalidated
    """

    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class QueryState:
    """Snapshot of one cache entry."""

    status: QueryStatus = QueryStatus.IDLE
    data: Any = None
    error: Exception | None = None
    is_stale: bool = False
    updated_at: datetime | None = None
    fetch_count: int = 0

    @property
    def is_settled(self) -> bool:
        return self.status in (QueryStatus.SUCCESS, QueryStatus.ERROR)

    @property
    def is_fresh(self) -> bool:
        """Settled and not invalidated, so reads are served from cache."""
        return self.is_settled and not self.is_stale
