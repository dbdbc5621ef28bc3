"""Exception hierarchy for the scanboard client."""


class ScanboardError(Exception):
    """Base class for all client errors."""


class RemoteError(ScanboardError):
    """A remote procedure call completed with a rejection.

    Attributes:
        message: Message text returned by the backend (or the transport)
        method: Remote operation name, e.g. "analyzeScan"
    """

    def __init__(self, message: str, method: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.method = method


class ClientUnavailableError(ScanboardError):
    """The remote client handle is not initialized yet."""

    def __init__(self) -> None:
        super().__init__("Client not available")


class SessionClosedError(ScanboardError):
    """A session or cache was used after logout."""
