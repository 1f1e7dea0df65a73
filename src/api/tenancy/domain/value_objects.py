"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and tenant configuration.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum

from ulid import ULID

from tenancy.domain.exceptions import InvalidTenantIdentifierError

_IDENTIFIER_PATTERN = re.compile(r"^[a-z0-9-]+$")
IDENTIFIER_MIN_LENGTH = 3
IDENTIFIER_MAX_LENGTH = 30

UNLIMITED = -1


@dataclass(frozen=True)
class TenantId:
    """Internal identifier for a Tenant.

    Uses ULID for sortability and distribution-friendly generation. This is
    the primary key of the directory row; requests name tenants by their
    ``TenantIdentifier`` instead.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))


@dataclass(frozen=True)
class TenantIdentifier:
    """Public, immutable tenant slug (e.g. ``empresa123``).

    Identifiers are lowercase, 3-30 characters, made of letters, digits
    and hyphens. This is the value carried by the X-Tenant-ID header, the
    ``tenant`` query parameter and the ``tenantId`` token claim.
    """

    value: str

    def __post_init__(self) -> None:
        if not (IDENTIFIER_MIN_LENGTH <= len(self.value) <= IDENTIFIER_MAX_LENGTH):
            raise InvalidTenantIdentifierError(
                f"Tenant identifier must be {IDENTIFIER_MIN_LENGTH}-"
                f"{IDENTIFIER_MAX_LENGTH} characters, got {len(self.value)}"
            )
        if not _IDENTIFIER_PATTERN.match(self.value):
            raise InvalidTenantIdentifierError(
                f"Tenant identifier may only contain lowercase letters, "
                f"digits and hyphens: '{self.value}'"
            )

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def parse(cls, raw: str) -> TenantIdentifier:
        """Normalize raw input (strip, lowercase) and validate it.

        Raises:
            InvalidTenantIdentifierError: If the normalized value is not a
                valid identifier.
        """
        return cls(value=raw.strip().lower())


class TenantStatus(StrEnum):
    """Lifecycle status of a tenant."""

    ACTIVE = "active"
    TRIAL = "trial"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class TenantPlan(StrEnum):
    """Subscription plan of a tenant."""

    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class Feature(StrEnum):
    """Feature flags gated by plan."""

    INVENTORY = "inventory"
    RECIPES = "recipes"
    SALES = "sales"
    PURCHASES = "purchases"
    REPORTS = "reports"
    API = "api"
    CUSTOM_BRANDING = "custom_branding"


class LimitKind(StrEnum):
    """Countable resources capped by plan."""

    USERS = "users"
    PRODUCTS = "products"
    CLIENTS = "clients"
    SUPPLIERS = "suppliers"


@dataclass(frozen=True)
class TenantLimits:
    """Plan limits. ``UNLIMITED`` (-1) lifts a cap."""

    max_users: int = 5
    max_products: int = 100
    max_clients: int = 50
    max_suppliers: int = 20
    max_storage_gb: int = 1
    max_api_calls_per_month: int = 1000

    def limit_for(self, kind: LimitKind) -> int:
        """Return the cap for a countable resource."""
        return getattr(self, f"max_{kind.value}")

    def allows(self, kind: LimitKind, current: int) -> bool:
        """Whether one more ``kind`` may be created given ``current`` count."""
        limit = self.limit_for(kind)
        return limit == UNLIMITED or current < limit

    def as_dict(self) -> dict[str, int]:
        """Serialize for persistence and API responses."""
        return {
            "max_users": self.max_users,
            "max_products": self.max_products,
            "max_clients": self.max_clients,
            "max_suppliers": self.max_suppliers,
            "max_storage_gb": self.max_storage_gb,
            "max_api_calls_per_month": self.max_api_calls_per_month,
        }

    @classmethod
    def for_plan(cls, plan: TenantPlan) -> TenantLimits:
        """Default limits of a plan."""
        return _PLAN_LIMITS[plan]


_PLAN_LIMITS: dict[TenantPlan, TenantLimits] = {
    TenantPlan.FREE: TenantLimits(),
    TenantPlan.BASIC: TenantLimits(
        max_users=20,
        max_products=1000,
        max_clients=500,
        max_suppliers=100,
        max_storage_gb=10,
        max_api_calls_per_month=10000,
    ),
    TenantPlan.PREMIUM: TenantLimits(
        max_users=50,
        max_products=5000,
        max_clients=2000,
        max_suppliers=500,
        max_storage_gb=50,
        max_api_calls_per_month=50000,
    ),
    TenantPlan.ENTERPRISE: TenantLimits(
        max_users=UNLIMITED,
        max_products=UNLIMITED,
        max_clients=UNLIMITED,
        max_suppliers=UNLIMITED,
        max_storage_gb=100,
        max_api_calls_per_month=100000,
    ),
}

_BASE_FEATURES = frozenset(
    {Feature.INVENTORY, Feature.RECIPES, Feature.SALES, Feature.PURCHASES}
)

PLAN_FEATURES: dict[TenantPlan, frozenset[Feature]] = {
    TenantPlan.FREE: _BASE_FEATURES,
    TenantPlan.BASIC: _BASE_FEATURES | {Feature.REPORTS},
    TenantPlan.PREMIUM: _BASE_FEATURES | {Feature.REPORTS, Feature.API},
    TenantPlan.ENTERPRISE: frozenset(Feature),
}


@dataclass(frozen=True)
class StoreLocation:
    """Where a tenant's isolated data lives.

    Attributes:
        database_name: Name of the tenant's database.
        connection_url: Dedicated server URL; None for tenants hosted on
            the directory's server.
        is_shared: True when the tenant shares the directory's server.
    """

    database_name: str
    connection_url: str | None = field(default=None, repr=False)
    is_shared: bool = True

    @classmethod
    def for_identifier(
        cls,
        identifier: TenantIdentifier,
        created_at_ms: int,
        connection_url: str | None = None,
    ) -> StoreLocation:
        """Build the store location of a newly registered tenant.

        Database names follow ``tenant_<identifier>_<ms timestamp>`` with
        hyphens mapped to underscores.
        """
        slug = identifier.value.replace("-", "_")
        return cls(
            database_name=f"tenant_{slug}_{created_at_ms}",
            connection_url=connection_url,
            is_shared=connection_url is None,
        )
