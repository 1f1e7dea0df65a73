"""Per-tenant cache of scoped data handles with single-flight construction."""

from __future__ import annotations

import asyncio
from typing import Any

from tenancy.application.observability import (
    DefaultHandleCacheProbe,
    HandleCacheProbe,
)
from tenancy.domain import Tenant
from tenancy.ports.exceptions import ConstructionFailureError
from tenancy.ports.storage import IScopedStoreFactory, ScopedDataHandle


class ScopedDataHandleCache:
    """Caches one ScopedDataHandle per tenant identifier.

    Handles are built by the storage backend on first use and kept until
    ``invalidate`` is called; request traffic never evicts them.

    Construction is single-flight per identifier: the first caller starts
    an ``asyncio.Task`` that opens the store, later callers for the same
    identifier await that task. Callers await it through
    ``asyncio.shield`` so a cancelled request neither cancels the
    construction nor receives its result. Unrelated tenants never wait on
    each other.
    """

    def __init__(
        self,
        factory: IScopedStoreFactory,
        probe: HandleCacheProbe | None = None,
    ) -> None:
        self._factory = factory
        self._probe = probe or DefaultHandleCacheProbe()
        self._handles: dict[str, ScopedDataHandle] = {}
        self._inflight: dict[str, asyncio.Task[ScopedDataHandle]] = {}
        self._generations: dict[str, int] = {}

    async def get_or_create(self, tenant: Tenant) -> ScopedDataHandle:
        """Return the tenant's cached handle, constructing it at most once.

        Args:
            tenant: The tenant whose handle is requested

        Returns:
            The tenant's scoped data handle

        Raises:
            ConstructionFailureError: If the storage backend failed, or the
                tenant was invalidated while its handle was being built.
        """
        key = tenant.identifier.value

        handle = self._handles.get(key)
        if handle is not None:
            self._probe.handle_cache_hit(key)
            return handle

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(
                self._construct(tenant, self._generations.get(key, 0)),
                name=f"scoped-store:{key}",
            )
            task.add_done_callback(_retrieve_exception)
            self._inflight[key] = task
        else:
            self._probe.handle_construction_joined(key)

        return await asyncio.shield(task)

    async def invalidate(self, identifier: str) -> bool:
        """Drop a tenant's handle so the next ``get_or_create`` rebuilds it.

        A construction still in flight for this identifier is detached: its
        handle is closed on completion instead of being cached.

        Args:
            identifier: Tenant identifier

        Returns:
            True if a cached handle was removed
        """
        self._generations[identifier] = self._generations.get(identifier, 0) + 1
        self._inflight.pop(identifier, None)
        handle = self._handles.pop(identifier, None)

        if handle is not None:
            await handle.close()
        self._probe.handle_invalidated(identifier, existed=handle is not None)
        return handle is not None

    async def close_all(self) -> int:
        """Release every cached handle and abandon in-flight constructions.

        Returns:
            Number of handles closed
        """
        inflight = list(self._inflight.values())
        self._inflight.clear()
        for task in inflight:
            task.cancel()
        if inflight:
            await asyncio.gather(*inflight, return_exceptions=True)

        handles = list(self._handles.values())
        self._handles.clear()
        await asyncio.gather(*(h.close() for h in handles))
        self._probe.handles_closed(len(handles))
        return len(handles)

    def stats(self) -> dict[str, Any]:
        """Snapshot of cached handles and in-flight constructions."""
        return {
            "total_handles": len(self._handles),
            "constructions_in_flight": len(self._inflight),
            "tenants": [
                {"tenant": key, "database": handle.database_name}
                for key, handle in sorted(self._handles.items())
            ],
        }

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._handles

    async def _construct(self, tenant: Tenant, generation: int) -> ScopedDataHandle:
        key = tenant.identifier.value
        this_task = asyncio.current_task()

        try:
            handle = await self._factory.open_scoped_store(tenant)
        except ConstructionFailureError as e:
            self._probe.handle_construction_failed(key, e)
            raise
        except Exception as e:
            self._probe.handle_construction_failed(key, e)
            raise ConstructionFailureError(key, str(e)) from e
        finally:
            if self._inflight.get(key) is this_task:
                del self._inflight[key]

        if self._generations.get(key, 0) != generation:
            self._probe.stale_handle_discarded(key)
            await handle.close()
            raise ConstructionFailureError(
                key, "tenant was invalidated while its store was opening"
            )

        self._handles[key] = handle
        self._probe.handle_constructed(key, handle.database_name)
        return handle


def _retrieve_exception(task: asyncio.Task[Any]) -> None:
    """Mark a finished construction's exception as retrieved.

    Every waiter may have been cancelled; the failure was already reported
    through the probe.
    """
    if not task.cancelled():
        task.exception()
