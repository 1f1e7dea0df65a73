"""Unit test fixtures with in-memory tenancy collaborators."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from tenancy.domain import Tenant, TenantIdentifier, TenantPlan, TenantStatus
from tenancy.ports.exceptions import (
    DuplicateTenantIdentifierError,
    UnknownTenantError,
)

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"
FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def make_tenant(
    identifier: str = "empresa123",
    status: TenantStatus = TenantStatus.ACTIVE,
    plan: TenantPlan = TenantPlan.FREE,
    trial_ends_at: datetime | None = None,
    now: datetime = FIXED_NOW,
) -> Tenant:
    """Build a tenant in the given status."""
    tenant = Tenant.create(
        identifier=TenantIdentifier.parse(identifier),
        name=f"{identifier} Corp",
        company_email=f"admin@{identifier}.example",
        plan=plan,
        now=now,
    )
    return replace(
        tenant,
        status=status,
        trial_ends_at=trial_ends_at if trial_ends_at else tenant.trial_ends_at,
    )


@dataclass
class FakeDataHandle:
    """Scoped data handle that records whether it was closed."""

    tenant_identifier: str
    database_name: str
    closed: bool = False
    session_obj: MagicMock = field(default_factory=MagicMock)

    @asynccontextmanager
    async def session(self):
        yield self.session_obj

    async def close(self) -> None:
        self.closed = True


class FakeStoreFactory:
    """Storage backend double.

    ``gate`` lets a test hold constructions open; ``failures`` maps an
    identifier to the exception its construction raises.
    """

    def __init__(self) -> None:
        self.opened: list[str] = []
        self.provisioned: list[str] = []
        self.handles: list[FakeDataHandle] = []
        self.failures: dict[str, Exception] = {}
        self.provision_failure: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()

    async def open_scoped_store(self, tenant: Tenant) -> FakeDataHandle:
        key = tenant.identifier.value
        self.opened.append(key)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if key in self.failures:
            raise self.failures[key]
        handle = FakeDataHandle(
            tenant_identifier=key,
            database_name=tenant.store.database_name,
        )
        self.handles.append(handle)
        return handle

    async def provision(self, tenant: Tenant) -> None:
        if self.provision_failure is not None:
            raise self.provision_failure
        self.provisioned.append(tenant.store.database_name)


class InMemoryTenantDirectory:
    """Tenant directory backed by a dict."""

    def __init__(self, *tenants: Tenant) -> None:
        self.tenants: dict[str, Tenant] = {t.identifier.value: t for t in tenants}
        self.lookups: list[str] = []

    async def find_by_identifier(self, identifier: str) -> Tenant | None:
        self.lookups.append(identifier)
        return self.tenants.get(identifier)

    async def register(self, tenant: Tenant) -> Tenant:
        key = tenant.identifier.value
        if key in self.tenants:
            raise DuplicateTenantIdentifierError(key)
        self.tenants[key] = tenant
        return tenant

    async def save(self, tenant: Tenant) -> None:
        key = tenant.identifier.value
        if key not in self.tenants:
            raise UnknownTenantError(key)
        self.tenants[key] = tenant

    async def list_all(self) -> list[Tenant]:
        return sorted(self.tenants.values(), key=lambda t: t.identifier.value)


@pytest.fixture
def active_tenant() -> Tenant:
    """An active tenant named empresa123."""
    return make_tenant("empresa123")


@pytest.fixture
def directory(active_tenant: Tenant) -> InMemoryTenantDirectory:
    """Directory holding the active tenant."""
    return InMemoryTenantDirectory(active_tenant)


@pytest.fixture
def store_factory() -> FakeStoreFactory:
    """Storage backend double."""
    return FakeStoreFactory()


@pytest.fixture
def fixed_clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def expired_trial_tenant() -> Tenant:
    """A trial tenant whose trial ended three days before FIXED_NOW."""
    return make_tenant(
        "caducado",
        status=TenantStatus.TRIAL,
        trial_ends_at=FIXED_NOW - timedelta(days=3),
    )


@pytest.fixture
def fixed_now() -> datetime:
    """The instant fixed_clock reports."""
    return FIXED_NOW


@pytest.fixture
def tenant_factory():
    """Factory building tenants relative to FIXED_NOW."""
    return make_tenant


@pytest.fixture
def directory_factory():
    """Factory building in-memory directories."""
    return InMemoryTenantDirectory


@pytest.fixture
def jwt_secret() -> str:
    """Shared secret used to sign test tokens."""
    return TEST_SECRET
