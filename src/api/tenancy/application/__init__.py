"""Tenancy application layer: resolution, registry, handle cache and services."""

from tenancy.application.context import RequestTenantContext, ResolutionSource
from tenancy.application.handle_cache import ScopedDataHandleCache
from tenancy.application.registry import TenantRegistry
from tenancy.application.resolver import RequestView, TenantResolver

__all__ = [
    "RequestTenantContext",
    "RequestView",
    "ResolutionSource",
    "ScopedDataHandleCache",
    "TenantRegistry",
    "TenantResolver",
]
