"""SQLAlchemy storage backend for tenant-scoped data handles.

Every tenant owns a separate PostgreSQL database. A handle wraps one async
engine bound to that database, so a session obtained from it can only
ever reach that tenant's records.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database import DatabaseConnectionError, ProvisioningError
from infrastructure.database.engines import (
    build_async_url,
    create_admin_engine,
    create_tenant_engine,
    with_database,
)
from infrastructure.observability import ConnectionProbe, DefaultConnectionProbe
from infrastructure.settings import DatabaseSettings
from tenancy.domain import Tenant
from tenancy.ports.exceptions import ConstructionFailureError
from tenancy.ports.storage import IScopedStoreFactory


@dataclass(frozen=True)
class SqlAlchemyScopedDataHandle:
    """Data handle bound to a single tenant database."""

    tenant_identifier: str
    database_name: str
    engine: AsyncEngine = field(repr=False)
    sessionmaker: async_sessionmaker[AsyncSession] = field(repr=False)
    probe: ConnectionProbe = field(
        default_factory=DefaultConnectionProbe, repr=False, compare=False
    )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session on the tenant database.

        Commits on clean exit and rolls back on error.
        """
        async with self.sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose the engine and its pooled connections."""
        await self.engine.dispose()
        self.probe.pool_closed(self.database_name)


class SqlAlchemyScopedStoreFactory(IScopedStoreFactory):
    """Opens and provisions per-tenant PostgreSQL databases.

    Tenants without a dedicated ``connection_url`` live on the directory's
    server under their own database name.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        pool_size: int = 5,
        probe: ConnectionProbe | None = None,
        admin_engine_factory: Callable[[DatabaseSettings], AsyncEngine] = (
            create_admin_engine
        ),
    ) -> None:
        self._settings = settings
        self._pool_size = pool_size
        self._probe = probe or DefaultConnectionProbe()
        self._admin_engine_factory = admin_engine_factory

    def url_for(self, tenant: Tenant) -> str:
        """Connection URL of the tenant's database."""
        store = tenant.store
        if store.connection_url:
            return with_database(store.connection_url, store.database_name)
        return build_async_url(self._settings, database=store.database_name)

    async def open_scoped_store(self, tenant: Tenant) -> SqlAlchemyScopedDataHandle:
        """Open a handle on the tenant database after a connectivity check.

        Raises:
            ConstructionFailureError: If the database cannot be reached.
        """
        identifier = tenant.identifier.value
        database = tenant.store.database_name
        url = self.url_for(tenant)
        host = make_url(url).host or ""

        engine = create_tenant_engine(url, pool_size=self._pool_size)
        try:
            await self._ping(engine, database)
        except DatabaseConnectionError as e:
            self._probe.connection_failed(host, database, e)
            await engine.dispose()
            raise ConstructionFailureError(identifier, str(e)) from e

        self._probe.connection_established(host, database)
        return SqlAlchemyScopedDataHandle(
            tenant_identifier=identifier,
            database_name=database,
            engine=engine,
            sessionmaker=async_sessionmaker(engine, expire_on_commit=False),
            probe=self._probe,
        )

    async def provision(self, tenant: Tenant) -> None:
        """Create the tenant database unless it already exists.

        Tenants on a dedicated server are expected to be provisioned by
        whoever runs that server; only shared-server databases are created.

        Raises:
            ConstructionFailureError: If the database cannot be created.
        """
        database = tenant.store.database_name
        if not tenant.store.is_shared:
            self._probe.database_provisioned(database, created=False)
            return

        engine = self._admin_engine_factory(self._settings)
        try:
            created = await self._create_database(engine, database)
        except ProvisioningError as e:
            raise ConstructionFailureError(tenant.identifier.value, str(e)) from e
        finally:
            await engine.dispose()

        self._probe.database_provisioned(database, created=created)

    @staticmethod
    async def _ping(engine: AsyncEngine, database: str) -> None:
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseConnectionError(str(e), database=database) from e

    @staticmethod
    async def _create_database(engine: AsyncEngine, database: str) -> bool:
        try:
            async with engine.connect() as conn:
                result = await conn.execute(
                    text("SELECT 1 FROM pg_database WHERE datname = :name"),
                    {"name": database},
                )
                if result.scalar_one_or_none() is not None:
                    return False
                quoted = conn.dialect.identifier_preparer.quote_identifier(database)
                await conn.execute(text(f"CREATE DATABASE {quoted}"))
        except (SQLAlchemyError, OSError) as e:
            raise ProvisioningError(str(e), database=database) from e
        return True
