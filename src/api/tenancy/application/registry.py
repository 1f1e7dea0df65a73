"""In-process tenant registry backed by the tenant directory."""

from __future__ import annotations

from tenancy.application.observability import (
    DefaultTenantRegistryProbe,
    TenantRegistryProbe,
)
from tenancy.domain import Tenant
from tenancy.ports.repositories import ITenantDirectory


class TenantRegistry:
    """Read-mostly map from tenant identifier to Tenant.

    Lookups are served from memory; a miss is refreshed from the tenant
    directory and the result is remembered. Entries are only ever replaced
    wholesale by complete ``Tenant`` values, so concurrent readers never
    observe a partially built record.

    Each identifier carries a generation counter bumped by ``evict`` and
    ``register``. A directory read that started before an eviction does
    not repopulate the registry with the record it fetched.
    """

    def __init__(
        self,
        directory: ITenantDirectory,
        probe: TenantRegistryProbe | None = None,
    ) -> None:
        self._directory = directory
        self._probe = probe or DefaultTenantRegistryProbe()
        self._tenants: dict[str, Tenant] = {}
        self._generations: dict[str, int] = {}

    async def lookup(self, identifier: str) -> Tenant | None:
        """Return the tenant named by ``identifier``, refreshing on a miss.

        Args:
            identifier: Normalized tenant identifier

        Returns:
            The Tenant, or None if the directory does not know it
        """
        tenant = self._tenants.get(identifier)
        if tenant is not None:
            self._probe.registry_hit(identifier)
            return tenant

        generation = self._generations.get(identifier, 0)
        tenant = await self._directory.find_by_identifier(identifier)
        self._probe.registry_refreshed(identifier, found=tenant is not None)

        if tenant is not None and self._generations.get(identifier, 0) == generation:
            self._tenants[identifier] = tenant
        return tenant

    async def register(self, tenant: Tenant) -> Tenant:
        """Write a new tenant through to the directory and remember it.

        Raises:
            DuplicateTenantIdentifierError: If the directory already has
                a tenant with this identifier.
        """
        stored = await self._directory.register(tenant)
        identifier = stored.identifier.value
        self._bump(identifier)
        self._tenants[identifier] = stored
        self._probe.tenant_registered(identifier)
        return stored

    def evict(self, identifier: str) -> None:
        """Forget a tenant so the next lookup reads the directory again."""
        self._bump(identifier)
        if self._tenants.pop(identifier, None) is not None:
            self._probe.tenant_evicted(identifier)

    def generation(self, identifier: str) -> int:
        """Current generation of ``identifier``.

        Callers holding a tenant across an await compare generations to
        detect an eviction or re-registration that happened meanwhile.
        """
        return self._generations.get(identifier, 0)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._tenants

    def __len__(self) -> int:
        return len(self._tenants)

    def _bump(self, identifier: str) -> None:
        self._generations[identifier] = self._generations.get(identifier, 0) + 1
