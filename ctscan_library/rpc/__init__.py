"""Remote procedure client contract and HTTP transport."""

from .http_client import HttpRemoteClient
from .protocol import WIRE_METHODS
from .protocol import RemoteProcedureClient

__all__ = [
    "HttpRemoteClient",
    "RemoteProcedureClient",
    "WIRE_METHODS",
]
