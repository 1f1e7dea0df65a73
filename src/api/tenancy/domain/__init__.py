"""Tenancy domain layer: the Tenant aggregate and its value objects."""

from tenancy.domain.exceptions import (
    InvalidTenantIdentifierError,
    InvalidTenantStatusError,
)
from tenancy.domain.tenant import ASSIGNABLE_STATUSES, DEFAULT_TRIAL_DAYS, Tenant
from tenancy.domain.value_objects import (
    PLAN_FEATURES,
    UNLIMITED,
    Feature,
    LimitKind,
    StoreLocation,
    TenantId,
    TenantIdentifier,
    TenantLimits,
    TenantPlan,
    TenantStatus,
)

__all__ = [
    "ASSIGNABLE_STATUSES",
    "DEFAULT_TRIAL_DAYS",
    "Feature",
    "InvalidTenantIdentifierError",
    "InvalidTenantStatusError",
    "LimitKind",
    "PLAN_FEATURES",
    "StoreLocation",
    "Tenant",
    "TenantId",
    "TenantIdentifier",
    "TenantLimits",
    "TenantPlan",
    "TenantStatus",
    "UNLIMITED",
]
