"""Cache and mutation orchestration.

Mediates every read and write between the consumption layer and the
remote procedure client.

Queries:
- current-user-profile: fail-fast, failure leaves the identity "not fetched"
- all-scans / scan-by-id / external-api-config / is-caller-admin / caller-role:
  fail-closed, a rejection resolves to [] / None / None / False / GUEST

Mutations call the backend first and then invalidate the identities they
affect; the cache is never patched with a locally guessed value.
"""

import logging
from collections import Counter
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..cache import ALL_SCANS
from ..cache import CALLER_ROLE
from ..cache import CURRENT_USER_PROFILE
from ..cache import EXTERNAL_API_CONFIG
from ..cache import IS_ADMIN
from ..cache import SCAN_PREFIX
from ..cache import QueryCache
from ..cache import QueryKey
from ..cache import QueryStatus
from ..cache import scan_key
from ..errors import ClientUnavailableError
from ..errors import RemoteError
from ..models import CTScan
from ..models import ExternalApiConfig
from ..models import PatientId
from ..models import ScanId
from ..models import UserProfile
from ..models import UserRole
from ..models import is_api_configured
from ..notifications import NotificationEmitter
from ..rpc import RemoteProcedureClient
from . import messages
from .results import MutationKind
from .results import MutationResult
from .results import MutationStatus
from .results import QueryResult

logger = logging.getLogger(__name__)

ClientGetter = Callable[[], RemoteProcedureClient | None]
RemoteCall = Callable[[RemoteProcedureClient], Awaitable[Any]]


@dataclass(frozen=True)
class _QueryPolicy:
    key: QueryKey
    fallback: Any
    # Fail-closed identities swallow every failure and cache the fallback
    degrade: bool


class ScanOrchestrator:
    """Query/mutation facade over one session's cache and client.

    Example:
        >>> orchestrator = ScanOrchestrator(lambda: client, QueryCache(), NotificationEmitter())
        >>> scans = await orchestrator.all_scans()
        >>> result = await orchestrator.upload_scan("PT-2025-001", blob)
    """

    def __init__(
        self,
        client_getter: ClientGetter,
        cache: QueryCache,
        notifier: NotificationEmitter,
    ) -> None:
        """Initialize orchestrator.

        Args:
            client_getter: Returns the remote client, or None while it is unavailable
            cache: Session-scoped query cache (owned exclusively by this orchestrator)
            notifier: Destination for mutation notifications
        """
        self._client_getter = client_getter
        self.cache = cache
        self.notifier = notifier
        self._pending: Counter[MutationKind] = Counter()

    # --- Queries ---

    async def _query(
        self,
        policy: _QueryPolicy,
        call: RemoteCall,
        enabled: bool = True,
    ) -> QueryResult[Any]:
        client = self._client_getter()
        if client is None or not enabled:
            logger.debug(f"Query disabled: {policy.key}")
            return QueryResult(key=policy.key, data=policy.fallback, status=QueryStatus.IDLE, is_enabled=False)

        async def fetcher() -> Any:
            if not policy.degrade:
                return await call(client)
            try:
                return await call(client)
            except Exception as e:
                logger.info(f"Query {policy.key} degraded to {policy.fallback!r}: {e}")
                return policy.fallback

        state = await self.cache.fetch(policy.key, fetcher)

        if state.status == QueryStatus.ERROR:
            return QueryResult(
                key=policy.key,
                data=policy.fallback,
                status=state.status,
                error=state.error,
                is_fetched=policy.degrade,
            )
        return QueryResult(key=policy.key, data=state.data, status=state.status, is_fetched=True)

    async def current_user_profile(self) -> QueryResult[UserProfile | None]:
        """Caller's profile. A rejection is not retried and leaves is_fetched False."""
        policy = _QueryPolicy(CURRENT_USER_PROFILE, None, degrade=False)
        return await self._query(policy, lambda c: c.get_caller_user_profile())

    async def all_scans(self) -> QueryResult[list[CTScan]]:
        policy = _QueryPolicy(ALL_SCANS, [], degrade=True)
        return await self._query(policy, lambda c: c.get_all_scans())

    async def scan(self, scan_id: ScanId | None) -> QueryResult[CTScan | None]:
        """One scan by id; disabled when scan_id is None."""
        policy = _QueryPolicy(scan_key(scan_id) if scan_id is not None else SCAN_PREFIX, None, degrade=True)
        return await self._query(policy, lambda c: c.read_scan(scan_id), enabled=scan_id is not None)

    async def external_api_config(self) -> QueryResult[ExternalApiConfig | None]:
        """Admin-only config. Non-admin rejections resolve to None like any other failure."""
        policy = _QueryPolicy(EXTERNAL_API_CONFIG, None, degrade=True)
        return await self._query(policy, lambda c: c.get_external_api_config())

    async def is_caller_admin(self) -> QueryResult[bool]:
        """Admin state for UI gating only. Fails closed to False."""
        policy = _QueryPolicy(IS_ADMIN, False, degrade=True)
        return await self._query(policy, lambda c: c.is_caller_admin())

    async def caller_role(self) -> QueryResult[UserRole]:
        policy = _QueryPolicy(CALLER_ROLE, UserRole.GUEST, degrade=True)
        return await self._query(policy, lambda c: c.get_caller_user_role())

    async def can_analyze(self) -> bool:
        """Client-side Analyze gate: external API has both endpoint and key."""
        config = await self.external_api_config()
        return is_api_configured(config.data)

    async def needs_onboarding(self) -> bool:
        """True once the profile query has resolved to no profile."""
        profile = await self.current_user_profile()
        return profile.is_fetched and profile.data is None

    # --- Mutations ---

    def is_pending(self, kind: MutationKind) -> bool:
        return self._pending[kind] > 0

    def _run_callback(self, kind: MutationKind, callback: Callable[[Any], None] | None, value: Any) -> None:
        # Hook failures are logged only; the mutation result stands
        if callback is None:
            return
        try:
            callback(value)
        except Exception as e:
            logger.error(f"Mutation {kind.value} callback failed: {e}")

    async def _mutate(
        self,
        kind: MutationKind,
        call: RemoteCall,
        invalidates: tuple[QueryKey, ...],
        success_message: str,
        failure_message: Callable[[str], str],
        on_success: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> MutationResult:
        self._pending[kind] += 1
        try:
            client = self._client_getter()
            if client is None:
                raise ClientUnavailableError()
            data = await call(client)
        except Exception as e:
            raw = e.message if isinstance(e, RemoteError) else str(e)
            message = failure_message(raw)
            logger.warning(f"Mutation {kind.value} failed: {raw}")
            await self.notifier.error(message, kind.value)
            self._run_callback(kind, on_error, e)
            return MutationResult(kind=kind, status=MutationStatus.ERROR, message=message, error=e)
        finally:
            self._pending[kind] -= 1

        if not self.cache.closed:
            for key in invalidates:
                self.cache.invalidate(key)

        await self.notifier.success(success_message, kind.value)
        self._run_callback(kind, on_success, data)
        return MutationResult(kind=kind, status=MutationStatus.SUCCESS, message=success_message, data=data)

    async def save_profile(
        self,
        profile: UserProfile,
        on_success: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> MutationResult:
        return await self._mutate(
            MutationKind.SAVE_PROFILE,
            lambda c: c.save_caller_user_profile(profile),
            (CURRENT_USER_PROFILE,),
            messages.PROFILE_SAVED,
            messages.save_profile_failed,
            on_success,
            on_error,
        )

    async def upload_scan(
        self,
        patient_id: PatientId,
        scan_blob: bytes,
        on_success: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> MutationResult:
        """Upload a scan; on success the new ScanId is in result.data."""
        return await self._mutate(
            MutationKind.UPLOAD_SCAN,
            lambda c: c.upload_scan(patient_id, scan_blob),
            (ALL_SCANS,),
            messages.SCAN_UPLOADED,
            messages.upload_scan_failed,
            on_success,
            on_error,
        )

    async def analyze_scan(
        self,
        scan_id: ScanId,
        on_success: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> MutationResult:
        """Run remote analysis.

        Invalidates the scan list and every scan-by-id entry. Misconfiguration
        rejections are reworded into configuration guidance.
        """
        return await self._mutate(
            MutationKind.ANALYZE_SCAN,
            lambda c: c.analyze_scan(scan_id),
            (ALL_SCANS, SCAN_PREFIX),
            messages.ANALYSIS_COMPLETED,
            messages.classify_analyze_error,
            on_success,
            on_error,
        )

    async def configure_external_api(
        self,
        config: ExternalApiConfig,
        on_success: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> MutationResult:
        return await self._mutate(
            MutationKind.CONFIGURE_EXTERNAL_API,
            lambda c: c.configure_external_api(config),
            (EXTERNAL_API_CONFIG,),
            messages.API_CONFIG_SAVED,
            messages.configure_api_failed,
            on_success,
            on_error,
        )
