"""FastAPI dependencies for the tenancy bounded context."""

from tenancy.dependencies.authentication import (
    get_bearer_claims,
    get_jwt_validator,
    require_admin,
)
from tenancy.dependencies.tenant import (
    get_handle_cache,
    get_tenant_resolver,
    get_tenant_service,
)
from tenancy.dependencies.tenant_context import (
    get_current_tenant,
    get_request_tenant_context,
    require_tenant,
    require_tenant_feature,
    require_within_limit,
    to_http_exception,
)

__all__ = [
    "get_bearer_claims",
    "get_current_tenant",
    "get_handle_cache",
    "get_jwt_validator",
    "get_request_tenant_context",
    "get_tenant_resolver",
    "get_tenant_service",
    "require_admin",
    "require_tenant",
    "require_tenant_feature",
    "require_within_limit",
    "to_http_exception",
]
