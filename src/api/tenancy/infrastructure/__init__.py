"""Tenancy infrastructure: directory persistence and tenant store backends."""

from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.scoped_store import (
    SqlAlchemyScopedDataHandle,
    SqlAlchemyScopedStoreFactory,
)
from tenancy.infrastructure.tenant_repository import SqlAlchemyTenantDirectory

__all__ = [
    "SqlAlchemyScopedDataHandle",
    "SqlAlchemyScopedStoreFactory",
    "SqlAlchemyTenantDirectory",
    "TenantModel",
]
