"""Exceptions for tenant resolution and tenant management.

These are the typed outcomes the resolver and the tenant service hand to
the request-handling layer. Every resolution failure derives from
``TenantResolutionError`` so callers can tell a failed resolution apart
from an unscoped request (which is not an error).
"""

from __future__ import annotations


class TenantResolutionError(Exception):
    """Base class for failures while resolving a request's tenant.

    Attributes:
        retryable: Whether repeating the same request may succeed.
    """

    retryable: bool = False


class UnknownTenantError(TenantResolutionError):
    """Raised when a candidate identifier does not name a registered tenant.

    Not retryable: the identifier is presumed wrong or stale.
    """

    def __init__(self, identifier: str):
        super().__init__(f"Tenant '{identifier}' not found")
        self.identifier = identifier


class InvalidCredentialError(TenantResolutionError):
    """Raised when a bearer credential is present but fails verification.

    Never downgraded to an unscoped request.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ConstructionFailureError(TenantResolutionError):
    """Raised when the storage backend cannot open a tenant's scoped store.

    Retryable: usually a transient connectivity problem.
    """

    retryable = True

    def __init__(self, identifier: str, reason: str):
        super().__init__(f"Could not open store for tenant '{identifier}': {reason}")
        self.identifier = identifier
        self.reason = reason


class TenantSuspendedError(TenantResolutionError):
    """Raised when the resolved tenant is suspended or cancelled."""

    def __init__(self, identifier: str, status: str):
        super().__init__(f"Tenant '{identifier}' is {status}")
        self.identifier = identifier
        self.status = status


class TrialExpiredError(TenantResolutionError):
    """Raised when the resolved tenant's trial period has ended."""

    def __init__(self, identifier: str, days_expired: int):
        super().__init__(f"Trial for tenant '{identifier}' has expired")
        self.identifier = identifier
        self.days_expired = days_expired


class DuplicateTenantIdentifierError(Exception):
    """Raised when registering a tenant whose identifier is already taken.

    This exception indicates that the business rule of globally unique
    tenant identifiers has been violated. The presentation layer maps it
    to a 409 response.
    """

    def __init__(self, identifier: str):
        super().__init__(f"Tenant identifier '{identifier}' is already registered")
        self.identifier = identifier
