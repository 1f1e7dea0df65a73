"""Request-scoped tenant context.

One ``RequestTenantContext`` is created per inbound request by the resolver
and discarded when the request ends. It is a frozen value: once resolved,
the tenant and data handle it carries cannot be swapped for another
tenant's within the same request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from shared_kernel.auth import TokenClaims
from tenancy.domain import Tenant
from tenancy.ports.storage import ScopedDataHandle

ResolutionSource = Literal["header", "query", "credential"]


@dataclass(frozen=True)
class RequestTenantContext:
    """Resolved tenant context for the current request.

    Attributes:
        tenant: The resolved tenant, or None for an unscoped request.
        data_handle: The tenant's scoped data handle; set exactly when
            ``tenant`` is set.
        source: Which strategy produced the tenant ('header', 'query' or
            'credential'); None for unscoped requests.
        claims: Verified bearer claims, when the request carried a
            credential that was verified during resolution.
    """

    tenant: Tenant | None = None
    data_handle: ScopedDataHandle | None = None
    source: ResolutionSource | None = None
    claims: TokenClaims | None = None

    def __post_init__(self) -> None:
        if (self.tenant is None) != (self.data_handle is None):
            raise ValueError("tenant and data_handle must be set together")
        if (
            self.tenant is not None
            and self.data_handle is not None
            and self.data_handle.tenant_identifier != self.tenant.identifier.value
        ):
            raise ValueError("data_handle belongs to a different tenant")

    @classmethod
    def unscoped(cls, claims: TokenClaims | None = None) -> RequestTenantContext:
        """Context for a request no strategy could attach to a tenant."""
        return cls(claims=claims)

    @property
    def is_scoped(self) -> bool:
        """Whether the request is bound to a tenant."""
        return self.tenant is not None

    @property
    def tenant_identifier(self) -> str | None:
        """Identifier of the bound tenant, if any."""
        return self.tenant.identifier.value if self.tenant is not None else None
