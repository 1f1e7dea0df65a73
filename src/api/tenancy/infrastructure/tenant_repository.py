"""PostgreSQL implementation of ITenantDirectory.

The directory outlives any single request: the registry reads through it
on lookup misses, so each call opens its own short-lived session from
the directory sessionmaker instead of borrowing a request session.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenancy.domain import Tenant
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.observability import (
    DefaultTenantDirectoryProbe,
    TenantDirectoryProbe,
)
from tenancy.ports.exceptions import (
    DuplicateTenantIdentifierError,
    UnknownTenantError,
)
from tenancy.ports.repositories import ITenantDirectory


class SqlAlchemyTenantDirectory(ITenantDirectory):
    """Tenant directory stored in the central PostgreSQL database."""

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        probe: TenantDirectoryProbe | None = None,
    ) -> None:
        """Initialize the directory.

        Args:
            sessionmaker: Factory for sessions on the directory database
            probe: Optional domain probe for observability
        """
        self._sessionmaker = sessionmaker
        self._probe = probe or DefaultTenantDirectoryProbe()

    async def find_by_identifier(self, identifier: str) -> Tenant | None:
        """Fetch a tenant by its public identifier.

        Args:
            identifier: Normalized tenant identifier

        Returns:
            The Tenant, or None if not found
        """
        stmt = select(TenantModel).where(TenantModel.identifier == identifier)
        async with self._sessionmaker() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            self._probe.tenant_not_found(identifier)
            return None

        self._probe.tenant_retrieved(identifier)
        return model.to_domain()

    async def register(self, tenant: Tenant) -> Tenant:
        """Insert a new tenant row.

        Raises:
            DuplicateTenantIdentifierError: If the identifier is taken
        """
        identifier = tenant.identifier.value
        try:
            async with self._sessionmaker() as session, session.begin():
                session.add(TenantModel.from_domain(tenant))
        except IntegrityError as e:
            # Unique constraint on identifier
            self._probe.duplicate_tenant_identifier(identifier)
            raise DuplicateTenantIdentifierError(identifier) from e

        self._probe.tenant_saved(identifier)
        return tenant

    async def save(self, tenant: Tenant) -> None:
        """Update an existing tenant row.

        Raises:
            UnknownTenantError: If no row has this tenant's id
        """
        identifier = tenant.identifier.value
        stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
        async with self._sessionmaker() as session, session.begin():
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            if model is None:
                self._probe.tenant_not_found(identifier)
                raise UnknownTenantError(identifier)
            model.apply(tenant)

        self._probe.tenant_saved(identifier)

    async def list_all(self) -> list[Tenant]:
        """List every tenant ordered by identifier."""
        stmt = select(TenantModel).order_by(TenantModel.identifier)
        async with self._sessionmaker() as session:
            result = await session.execute(stmt)
            models = result.scalars().all()

        self._probe.tenants_listed(len(models))
        return [model.to_domain() for model in models]
