"""Query identities.

A QueryKey is derived from an operation name and its arguments. Arguments
are normalized to strings, so equal (operation, argument) pairs always
address the same cache entry.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class QueryKey:
    """Hashable cache identity, e.g. ("scan", "42")."""

    parts: tuple[str, ...]

    @classmethod
    def of(cls, operation: str, *args: Any) -> "QueryKey":
        return cls((operation, *(str(arg) for arg in args)))

    def matches(self, prefix: "QueryKey") -> bool:
        """True when this key starts with every part of prefix."""
        return self.parts[: len(prefix.parts)] == prefix.parts

    def __str__(self) -> str:
        return "/".join(self.parts)


CURRENT_USER_PROFILE = QueryKey.of("currentUserProfile")
ALL_SCANS = QueryKey.of("scans")
SCAN_PREFIX = QueryKey.of("scan")
EXTERNAL_API_CONFIG = QueryKey.of("externalApiConfig")
IS_ADMIN = QueryKey.of("isAdmin")
CALLER_ROLE = QueryKey.of("callerUserRole")


def scan_key(scan_id: Any) -> QueryKey:
    """Identity of one scan-by-id entry."""
    return QueryKey.of("scan", scan_id)
