"""Domain-Oriented Observability for the tenancy application layer.

Probes for resolution, caching, registry and service operations following
Domain-Oriented Observability patterns.
"""

from tenancy.application.observability.handle_cache_probe import (
    DefaultHandleCacheProbe,
    HandleCacheProbe,
)
from tenancy.application.observability.registry_probe import (
    DefaultTenantRegistryProbe,
    TenantRegistryProbe,
)
from tenancy.application.observability.resolution_probe import (
    DefaultTenantResolutionProbe,
    TenantResolutionProbe,
)
from tenancy.application.observability.tenant_service_probe import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)

__all__ = [
    "HandleCacheProbe",
    "DefaultHandleCacheProbe",
    "TenantRegistryProbe",
    "DefaultTenantRegistryProbe",
    "TenantResolutionProbe",
    "DefaultTenantResolutionProbe",
    "TenantServiceProbe",
    "DefaultTenantServiceProbe",
]
