"""Ports (interfaces) of the tenancy bounded context."""

from tenancy.ports.credentials import ICredentialVerifier
from tenancy.ports.repositories import ITenantDirectory
from tenancy.ports.storage import IScopedStoreFactory, ScopedDataHandle

__all__ = [
    "ICredentialVerifier",
    "IScopedStoreFactory",
    "ITenantDirectory",
    "ScopedDataHandle",
]
