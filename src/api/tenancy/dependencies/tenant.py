"""FastAPI dependencies exposing the tenancy components built at startup.

The lifespan in ``main`` constructs the registry, handle cache, resolver
and service once and stores them on ``app.state``; these getters hand
them to route dependencies.
"""

from fastapi import Request

from tenancy.application import ScopedDataHandleCache, TenantResolver
from tenancy.application.services import TenantService


def get_tenant_resolver(request: Request) -> TenantResolver:
    """Get the application's TenantResolver."""
    return request.app.state.tenant_resolver


def get_tenant_service(request: Request) -> TenantService:
    """Get the application's TenantService."""
    return request.app.state.tenant_service


def get_handle_cache(request: Request) -> ScopedDataHandleCache:
    """Get the application's scoped data handle cache."""
    return request.app.state.handle_cache
