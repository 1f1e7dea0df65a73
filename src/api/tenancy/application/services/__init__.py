"""Application services for the tenancy bounded context."""

from tenancy.application.services.tenant_service import TenantService

__all__ = [
    "TenantService",
]
