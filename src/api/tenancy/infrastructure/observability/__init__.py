"""Observability probes for tenancy infrastructure."""

from tenancy.infrastructure.observability.repository_probe import (
    DefaultTenantDirectoryProbe,
    TenantDirectoryProbe,
)

__all__ = [
    "TenantDirectoryProbe",
    "DefaultTenantDirectoryProbe",
]
