"""Query cache for the scanboard client.

Provides identity-keyed caching of remote query results:
- Deterministic query identities
- In-flight de-duplication
- Prefix invalidation
- Session-scoped lifecycle (clear/close on logout)
"""

from .keys import ALL_SCANS
from .keys import CALLER_ROLE
from .keys import CURRENT_USER_PROFILE
from .keys import EXTERNAL_API_CONFIG
from .keys import IS_ADMIN
from .keys import SCAN_PREFIX
from .keys import QueryKey
from .keys import scan_key
from .models import QueryState
from .models import QueryStatus
from .store import QueryCache

__all__ = [
    "ALL_SCANS",
    "CALLER_ROLE",
    "CURRENT_USER_PROFILE",
    "EXTERNAL_API_CONFIG",
    "IS_ADMIN",
    "SCAN_PREFIX",
    "QueryCache",
    "QueryKey",
    "QueryState",
    "QueryStatus",
    "scan_key",
]
