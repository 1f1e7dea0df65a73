"""Tenant application service for registration and status changes."""

from __future__ import annotations

from tenancy.application.handle_cache import ScopedDataHandleCache
from tenancy.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from tenancy.application.registry import TenantRegistry
from tenancy.domain import (
    DEFAULT_TRIAL_DAYS,
    InvalidTenantIdentifierError,
    Tenant,
    TenantIdentifier,
    TenantPlan,
    TenantStatus,
)
from tenancy.ports.exceptions import (
    ConstructionFailureError,
    DuplicateTenantIdentifierError,
    UnknownTenantError,
)
from tenancy.ports.repositories import ITenantDirectory
from tenancy.ports.storage import IScopedStoreFactory


class TenantService:
    """Application service orchestrating tenant lifecycle operations.

    Registration writes the tenant through the registry and provisions its
    isolated store. A status change writes the tenant to the directory and
    drops it from the registry and the handle cache, so in-process state
    never outlives the directory record it was read from.
    """

    def __init__(
        self,
        directory: ITenantDirectory,
        registry: TenantRegistry,
        cache: ScopedDataHandleCache,
        store_factory: IScopedStoreFactory,
        probe: TenantServiceProbe | None = None,
        trial_days: int = DEFAULT_TRIAL_DAYS,
    ) -> None:
        self._directory = directory
        self._registry = registry
        self._cache = cache
        self._store_factory = store_factory
        self._probe = probe or DefaultTenantServiceProbe()
        self._trial_days = trial_days

    async def register_tenant(
        self,
        identifier: str,
        name: str,
        company_email: str,
        plan: TenantPlan = TenantPlan.FREE,
        connection_url: str | None = None,
    ) -> Tenant:
        """Register a new tenant and provision its store.

        Args:
            identifier: Requested tenant identifier (normalized to lowercase)
            name: Organization display name
            company_email: Organization contact e-mail
            plan: Subscription plan
            connection_url: Dedicated database server, None to share the
                directory's server

        Returns:
            The registered Tenant, in trial status

        Raises:
            InvalidTenantIdentifierError: If the identifier is malformed
            DuplicateTenantIdentifierError: If the identifier is taken
            ConstructionFailureError: If the tenant store cannot be created
        """
        parsed = TenantIdentifier.parse(identifier)

        if await self._directory.find_by_identifier(parsed.value) is not None:
            self._probe.duplicate_tenant_identifier(parsed.value)
            raise DuplicateTenantIdentifierError(parsed.value)

        tenant = Tenant.create(
            identifier=parsed,
            name=name,
            company_email=company_email,
            plan=plan,
            trial_days=self._trial_days,
            connection_url=connection_url,
        )

        try:
            stored = await self._registry.register(tenant)
        except DuplicateTenantIdentifierError:
            # Lost a race with a concurrent registration
            self._probe.duplicate_tenant_identifier(parsed.value)
            raise

        try:
            await self._store_factory.provision(stored)
        except ConstructionFailureError as e:
            self._probe.provisioning_failed(parsed.value, e)
            raise

        self._probe.tenant_registered(parsed.value, stored.store.database_name)
        return stored

    async def list_tenants(
        self,
        status: TenantStatus | None = None,
        plan: TenantPlan | None = None,
    ) -> list[Tenant]:
        """List tenants from the directory, optionally filtered.

        Args:
            status: Only tenants in this status
            plan: Only tenants on this plan

        Returns:
            Matching tenants ordered by identifier
        """
        tenants = [
            tenant
            for tenant in await self._directory.list_all()
            if (status is None or tenant.status == status)
            and (plan is None or tenant.plan == plan)
        ]
        self._probe.tenants_listed(len(tenants))
        return tenants

    async def change_status(
        self, identifier: str, status: TenantStatus | str
    ) -> Tenant:
        """Move a tenant to a new status and release its in-process state.

        Reads the current record from the directory rather than the
        registry so a stale in-process copy is never written back. The
        registry entry and the cached handle are dropped whatever the new
        status, so the next request re-reads the record.

        Args:
            identifier: Tenant identifier
            status: ``active``, ``suspended`` or ``cancelled``

        Returns:
            The updated Tenant

        Raises:
            UnknownTenantError: If no tenant has this identifier
            InvalidTenantStatusError: If ``status`` cannot be assigned
        """
        try:
            parsed = TenantIdentifier.parse(identifier)
        except InvalidTenantIdentifierError as e:
            raise UnknownTenantError(identifier) from e

        tenant = await self._directory.find_by_identifier(parsed.value)
        if tenant is None:
            self._probe.tenant_not_found(parsed.value)
            raise UnknownTenantError(parsed.value)

        updated = tenant.with_status(status)
        await self._directory.save(updated)
        self._registry.evict(parsed.value)
        await self._cache.invalidate(parsed.value)

        self._probe.tenant_status_changed(parsed.value, updated.status.value)
        return updated

    async def deactivate_tenant(self, identifier: str) -> Tenant:
        """Suspend a tenant and release its cached handle.

        Raises:
            UnknownTenantError: If no tenant has this identifier
        """
        return await self.change_status(identifier, TenantStatus.SUSPENDED)
