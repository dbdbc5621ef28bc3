"""CT scan dashboard client library.

This is the business logic layer between the consumption layer (scanboard
CLI) and the remote scan-analysis backend.

Public Interface:
    Modules:
    - models: Remote data structures
    - rpc: Remote procedure client contract and HTTP transport
    - cache: Query identities and the session cache
    - orchestrator: Queries, mutations and invalidation rules
    - session: Login-scoped lifecycle
    - config: Configuration loading
"""

from .errors import ClientUnavailableError
from .errors import RemoteError
from .errors import ScanboardError
from .errors import SessionClosedError
from .orchestrator import ScanOrchestrator
from .session import ClientSession

__all__ = [
    "ClientSession",
    "ClientUnavailableError",
    "RemoteError",
    "ScanOrchestrator",
    "ScanboardError",
    "SessionClosedError",
]
