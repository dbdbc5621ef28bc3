"""Per-login client session.

A ClientSession is created when the caller authenticates and owns
everything scoped to that identity: the remote client handle, the query
cache, the notification emitter and the orchestrator. logout() tears all
of it down, so cached admin state never survives an identity change.
"""

import logging
from types import TracebackType

from .cache import QueryCache
from .config.settings import ClientSettings
from .errors import SessionClosedError
from .notifications import NotificationEmitter
from .orchestrator import ScanOrchestrator
from .rpc import HttpRemoteClient
from .rpc import RemoteProcedureClient

logger = logging.getLogger(__name__)


class ClientSession:
    """Session-scoped state for one authenticated caller."""

    def __init__(self, identity: str, client: RemoteProcedureClient | None = None) -> None:
        """Initialize session.

        Args:
            identity: Caller identity (token or principal) the session belongs to
            client: Remote client; None leaves queries disabled until attach_client()
        """
        self.identity = identity
        self._client = client
        self._closed = False
        self.cache = QueryCache()
        self.notifier = NotificationEmitter()
        self._orchestrator = ScanOrchestrator(self._ready_client, self.cache, self.notifier)
        logger.info(f"Session started (client {'ready' if client else 'pending'})")

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "ClientSession":
        """Create a session with an HTTP client built from settings."""
        return cls(identity=settings.identity, client=HttpRemoteClient.from_settings(settings))

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def client_ready(self) -> bool:
        return self._client is not None and not self._closed

    @property
    def orchestrator(self) -> ScanOrchestrator:
        if self._closed:
            raise SessionClosedError("Session has been logged out")
        return self._orchestrator

    def _ready_client(self) -> RemoteProcedureClient | None:
        return self._client if self.client_ready else None

    def attach_client(self, client: RemoteProcedureClient) -> None:
        """Provide the remote client once it has finished initializing."""
        if self._closed:
            raise SessionClosedError("Session has been logged out")
        self._client = client
        logger.info("Remote client attached")

    async def logout(self) -> None:
        """Tear down the session: drop all cached state and close the client.

        Idempotent.
        """
        if self._closed:
            return
        self._closed = True
        self.cache.close()
        self.notifier.close()
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()
        logger.info("Session logged out")

    async def __aenter__(self) -> "ClientSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.logout()
