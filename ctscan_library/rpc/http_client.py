"""HTTP transport for the remote procedure client.

Each operation is a ``POST {base_url}/rpc/{wireMethod}`` with a camelCase JSON
body (binary fields base64) and a bearer identity. Successful responses carry
``{"result": ...}``; rejections carry ``{"error": "<message>"}`` with a
non-2xx status.
"""

import logging
from typing import Any
from typing import Generic
from typing import TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError

from ..config.settings import ClientSettings
from ..errors import RemoteError
from ..models import CamelCaseModel
from ..models import CTScan
from ..models import ExternalApiConfig
from ..models import PatientId
from ..models import ScanId
from ..models import UserProfile
from ..models import UserRole
from .protocol import WIRE_METHODS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RpcResponse(BaseModel, Generic[T]):
    """Success envelope."""

    result: T | None = None


class RpcErrorBody(BaseModel):
    """Rejection envelope."""

    error: str


class UploadScanRequest(CamelCaseModel):
    patient_id: PatientId
    scan_blob: bytes


class ScanIdRequest(CamelCaseModel):
    scan_id: ScanId


class HttpRemoteClient:
    """httpx-backed implementation of RemoteProcedureClient.

    Transport failures and malformed responses surface as RemoteError so
    callers see a single rejection type.
    """

    def __init__(
        self,
        base_url: str,
        identity: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            base_url: Backend base URL
            identity: Bearer token for the authenticated caller
            timeout: Per-request timeout in seconds
            transport: Optional transport override (tests use httpx.MockTransport)
        """
        headers = {"Accept": "application/json"}
        if identity:
            headers["Authorization"] = f"Bearer {identity}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        logger.info(f"Created HttpRemoteClient for {base_url}")

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "HttpRemoteClient":
        return cls(
            base_url=settings.backend_url,
            identity=settings.identity,
            timeout=settings.request_timeout_s,
        )

    async def _call(self, name: str, result_type: Any, payload: dict[str, Any] | None = None) -> Any:
        """Invoke one remote operation and decode its result.

        Args:
            name: Python operation name (key of WIRE_METHODS)
            result_type: Type the result is validated against
            payload: JSON-ready arguments

        Returns:
            Decoded result

        Raises:
            RemoteError: On transport failure, rejection, or undecodable result
        """
        method = WIRE_METHODS[name]
        try:
            response = await self._client.post(f"/rpc/{method}", json=payload or {})
        except httpx.HTTPError as e:
            logger.warning(f"Transport error calling {method}: {e}")
            raise RemoteError(str(e) or e.__class__.__name__, method) from e

        if response.is_error:
            message = self._error_message(response)
            logger.debug(f"{method} rejected ({response.status_code}): {message}")
            raise RemoteError(message, method)

        try:
            return RpcResponse[result_type].model_validate_json(response.content).result
        except ValidationError as e:
            logger.error(f"Malformed response from {method}: {e}")
            raise RemoteError(f"Malformed response from {method}", method) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return RpcErrorBody.model_validate_json(response.content).error
        except ValidationError:
            return response.text or f"HTTP {response.status_code}"

    async def get_caller_user_profile(self) -> UserProfile | None:
        return await self._call("get_caller_user_profile", UserProfile)

    async def save_caller_user_profile(self, profile: UserProfile) -> None:
        await self._call(
            "save_caller_user_profile",
            Any,
            {"profile": profile.model_dump(mode="json", by_alias=True)},
        )

    async def get_all_scans(self) -> list[CTScan]:
        return await self._call("get_all_scans", list[CTScan]) or []

    async def read_scan(self, scan_id: ScanId) -> CTScan:
        scan = await self._call("read_scan", CTScan, ScanIdRequest(scan_id=scan_id).model_dump(by_alias=True))
        if scan is None:
            raise RemoteError(f"Scan not found: {scan_id}", WIRE_METHODS["read_scan"])
        return scan

    async def upload_scan(self, patient_id: PatientId, scan_blob: bytes) -> ScanId:
        request = UploadScanRequest(patient_id=patient_id, scan_blob=scan_blob)
        return await self._call("upload_scan", ScanId, request.model_dump(mode="json", by_alias=True))

    async def analyze_scan(self, scan_id: ScanId) -> ScanId:
        return await self._call("analyze_scan", ScanId, ScanIdRequest(scan_id=scan_id).model_dump(by_alias=True))

    async def get_external_api_config(self) -> ExternalApiConfig | None:
        return await self._call("get_external_api_config", ExternalApiConfig)

    async def configure_external_api(self, config: ExternalApiConfig) -> None:
        await self._call(
            "configure_external_api",
            Any,
            {"config": config.model_dump(mode="json", by_alias=True)},
        )

    async def is_caller_admin(self) -> bool:
        return bool(await self._call("is_caller_admin", bool))

    async def get_caller_user_role(self) -> UserRole:
        role = await self._call("get_caller_user_role", UserRole)
        return role if role is not None else UserRole.GUEST

    async def aclose(self) -> None:
        await self._client.aclose()
        logger.info("Closed HttpRemoteClient")
