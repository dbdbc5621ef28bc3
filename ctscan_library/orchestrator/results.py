"""Result types returned to the consumption layer."""

from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import Generic
from typing import TypeVar

from ..cache import QueryKey
from ..cache import QueryStatus

T = TypeVar("T")


@dataclass
class QueryResult(Generic[T]):
    """Resolved view of one query identity.

    Attributes:
        key: Query identity
        data: Cached value, or the identity's fallback when disabled/failed
        status: Cache entry status (IDLE when the query is disabled)
        error: Failure of the last fetch, if any
        is_enabled: False when the precondition (client ready, id present) failed
        is_fetched: True once a value has been resolved from the backend
    """

    key: QueryKey
    data: T
    status: QueryStatus
    error: Exception | None = None
    is_enabled: bool = True
    is_fetched: bool = False

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR


class MutationKind(str, Enum):
    """Write-through operations."""

    SAVE_PROFILE = "save-profile"
    UPLOAD_SCAN = "upload-scan"
    ANALYZE_SCAN = "analyze-scan"
    CONFIGURE_EXTERNAL_API = "configure-external-api"


class MutationStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class MutationResult:
    """Outcome of one mutation. The message is what the user was shown."""

    kind: MutationKind
    status: MutationStatus
    message: str
    data: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status == MutationStatus.SUCCESS
