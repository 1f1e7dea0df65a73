"""Storage backend ports.

A ``ScopedDataHandle`` is the only path from business logic to a tenant's
records: every session it hands out is bound to that tenant's database.
"""

from __future__ import annotations

from typing import Any, AsyncContextManager, Protocol, runtime_checkable

from tenancy.domain import Tenant


@runtime_checkable
class ScopedDataHandle(Protocol):
    """Per-tenant data-access handle.

    Handles are shared across requests of the same tenant and must not be
    mutated after construction.
    """

    @property
    def tenant_identifier(self) -> str:
        """Identifier of the tenant this handle is bound to."""
        ...

    @property
    def database_name(self) -> str:
        """Name of the tenant database behind this handle."""
        ...

    def session(self) -> AsyncContextManager[Any]:
        """Open a session confined to the tenant's database."""
        ...

    async def close(self) -> None:
        """Release the handle's connections."""
        ...


@runtime_checkable
class IScopedStoreFactory(Protocol):
    """Opens and provisions tenant stores."""

    async def open_scoped_store(self, tenant: Tenant) -> ScopedDataHandle:
        """Open a handle on the tenant's isolated store.

        May involve network connection setup.

        Raises:
            ConstructionFailureError: If the store cannot be reached.
        """
        ...

    async def provision(self, tenant: Tenant) -> None:
        """Create the tenant's store if it does not exist yet.

        Raises:
            ConstructionFailureError: If the store cannot be created.
        """
        ...
