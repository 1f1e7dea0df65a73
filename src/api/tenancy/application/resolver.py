"""Tenant resolver: maps an inbound request to a tenant-scoped context.

Strategy order (first match wins, results are never merged):

1. ``X-Tenant-ID`` header
2. ``tenant`` query parameter
3. ``tenantId`` claim of a verified bearer credential

The header is the signal a trusted proxy asserts, so it short-circuits the
chain. Otherwise a bearer credential, when present, is verified before the
query parameter is considered: a forged or expired credential fails the
request instead of being silently outranked by a user-suppliable query
parameter.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Protocol

from shared_kernel.auth import InvalidTokenError, TokenClaims, extract_bearer_token
from tenancy.application.context import RequestTenantContext, ResolutionSource
from tenancy.application.handle_cache import ScopedDataHandleCache
from tenancy.application.observability import (
    DefaultTenantResolutionProbe,
    TenantResolutionProbe,
)
from tenancy.application.registry import TenantRegistry
from tenancy.domain import InvalidTenantIdentifierError, Tenant, TenantIdentifier
from tenancy.ports.credentials import ICredentialVerifier
from tenancy.ports.exceptions import (
    ConstructionFailureError,
    InvalidCredentialError,
    TenantSuspendedError,
    TrialExpiredError,
    UnknownTenantError,
)

DEFAULT_TENANT_HEADER = "X-Tenant-ID"
DEFAULT_TENANT_QUERY_PARAM = "tenant"
AUTHORIZATION_HEADER = "Authorization"

# A tenant evicted mid-resolution is re-read once before giving up
_MAX_BIND_ATTEMPTS = 2


class RequestView(Protocol):
    """The parts of an inbound request the resolver reads.

    Starlette's ``Request`` satisfies this protocol; header lookups are
    expected to be case-insensitive.
    """

    @property
    def headers(self) -> Mapping[str, str]: ...

    @property
    def query_params(self) -> Mapping[str, str]: ...


def _present(value: str | None) -> str | None:
    """Treat missing, empty and whitespace-only values alike."""
    if value is None or not value.strip():
        return None
    return value


class TenantResolver:
    """Resolves requests to tenants and binds their scoped data handles."""

    def __init__(
        self,
        registry: TenantRegistry,
        cache: ScopedDataHandleCache,
        verifier: ICredentialVerifier,
        probe: TenantResolutionProbe | None = None,
        header_name: str = DEFAULT_TENANT_HEADER,
        query_param: str = DEFAULT_TENANT_QUERY_PARAM,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            registry: Tenant registry used to look up candidates.
            cache: Cache of per-tenant scoped data handles.
            verifier: Bearer credential verifier.
            probe: Domain probe for observability.
            header_name: Header carrying the tenant identifier.
            query_param: Query parameter carrying the tenant identifier.
            clock: Source of "now" for trial expiry checks.
        """
        self._registry = registry
        self._cache = cache
        self._verifier = verifier
        self._probe = probe or DefaultTenantResolutionProbe()
        self._header_name = header_name
        self._query_param = query_param
        self._clock = clock or (lambda: datetime.now(UTC))

    async def resolve(self, request: RequestView) -> RequestTenantContext:
        """Resolve the tenant of ``request``.

        Args:
            request: The inbound request.

        Returns:
            A context bound to the tenant and its data handle, or an
            unscoped context when no strategy yields a candidate.

        Raises:
            InvalidCredentialError: A bearer credential failed verification.
            UnknownTenantError: The candidate identifier is not registered.
            TenantSuspendedError: The tenant is suspended or cancelled.
            TrialExpiredError: The tenant's trial has ended.
            ConstructionFailureError: The tenant's store could not be opened.
        """
        header_value = _present(request.headers.get(self._header_name))
        if header_value is not None:
            return await self._bind(header_value, source="header", claims=None)

        claims = await self._verify_credential(request)

        query_value = _present(request.query_params.get(self._query_param))
        if query_value is not None:
            return await self._bind(query_value, source="query", claims=claims)

        claimed = _present(claims.tenant_id) if claims is not None else None
        if claimed is not None:
            return await self._bind(claimed, source="credential", claims=claims)

        self._probe.request_unscoped()
        return RequestTenantContext.unscoped(claims=claims)

    async def _verify_credential(self, request: RequestView) -> TokenClaims | None:
        token = extract_bearer_token(request.headers.get(AUTHORIZATION_HEADER))
        if token is None:
            return None

        try:
            return await self._verifier.verify(token)
        except InvalidTokenError as e:
            self._probe.invalid_credential(reason=str(e))
            raise InvalidCredentialError(str(e)) from e

    async def _bind(
        self,
        raw_value: str,
        source: ResolutionSource,
        claims: TokenClaims | None,
    ) -> RequestTenantContext:
        try:
            identifier = TenantIdentifier.parse(raw_value)
        except InvalidTenantIdentifierError as e:
            # Malformed identifiers cannot name a registered tenant
            self._probe.unknown_tenant(raw_value=raw_value, source=source)
            raise UnknownTenantError(raw_value.strip()) from e

        key = identifier.value
        for _ in range(_MAX_BIND_ATTEMPTS):
            generation = self._registry.generation(key)
            tenant = await self._load_servable(key, source)
            handle = await self._cache.get_or_create(tenant)

            if self._registry.generation(key) == generation:
                self._probe.tenant_resolved(key, source=source)
                return RequestTenantContext(
                    tenant=tenant,
                    data_handle=handle,
                    source=source,
                    claims=claims,
                )

            # Evicted while resolving: the record read may be stale
            self._probe.tenant_changed(key)
            await self._cache.invalidate(key)

        raise ConstructionFailureError(key, "tenant changed while resolving")

    async def _load_servable(self, key: str, source: ResolutionSource) -> Tenant:
        tenant = await self._registry.lookup(key)
        if tenant is None:
            self._probe.unknown_tenant(raw_value=key, source=source)
            raise UnknownTenantError(key)

        if not tenant.is_active:
            self._probe.tenant_suspended(key, tenant.status.value)
            raise TenantSuspendedError(key, tenant.status.value)

        now = self._clock()
        if tenant.is_trial_expired(now):
            days_expired = tenant.days_since_trial_expired(now)
            self._probe.trial_expired(key, days_expired)
            raise TrialExpiredError(key, days_expired)

        return tenant
