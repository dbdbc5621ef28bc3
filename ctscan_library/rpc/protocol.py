"""Remote procedure client contract.

The orchestrator depends only on this call contract: operation name,
arguments, and either a result or a rejection carrying a message. Every
method is a suspension point; implementations raise RemoteError on
rejection.

Wire names (getCallerUserProfile, readScan, ...) are listed in WIRE_METHODS
for transports that need them.
"""

from typing import Protocol
from typing import runtime_checkable

from ..models import CTScan
from ..models import ExternalApiConfig
from ..models import PatientId
from ..models import ScanId
from ..models import UserProfile
from ..models import UserRole

WIRE_METHODS: dict[str, str] = {
    "get_caller_user_profile": "getCallerUserProfile",
    "save_caller_user_profile": "saveCallerUserProfile",
    "get_all_scans": "getAllScans",
    "read_scan": "readScan",
    "upload_scan": "uploadScan",
    "analyze_scan": "analyzeScan",
    "get_external_api_config": "getExternalApiConfig",
    "configure_external_api": "configureExternalApi",
    "is_caller_admin": "isCallerAdmin",
    "get_caller_user_role": "getCallerUserRole",
}


@runtime_checkable
class RemoteProcedureClient(Protocol):
    """Async interface to the scan-analysis backend."""

    async def get_caller_user_profile(self) -> UserProfile | None: ...

    async def save_caller_user_profile(self, profile: UserProfile) -> None: ...

    async def get_all_scans(self) -> list[CTScan]: ...

    async def read_scan(self, scan_id: ScanId) -> CTScan:
        """Fails with RemoteError if the id is unknown."""
        ...

    async def upload_scan(self, patient_id: PatientId, scan_blob: bytes) -> ScanId: ...

    async def analyze_scan(self, scan_id: ScanId) -> ScanId:
        """Fails with RemoteError when the external API is misconfigured."""
        ...

    async def get_external_api_config(self) -> ExternalApiConfig | None:
        """Admin only; rejects for other callers."""
        ...

    async def configure_external_api(self, config: ExternalApiConfig) -> None:
        """Admin only."""
        ...

    async def is_caller_admin(self) -> bool: ...

    async def get_caller_user_role(self) -> UserRole: ...

    async def aclose(self) -> None: ...
