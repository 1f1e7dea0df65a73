"""Pydantic models for tenant API requests and responses."""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, Field

from tenancy.domain import Tenant, TenantPlan


class RegisterTenantRequest(BaseModel):
    """Request model for registering a tenant."""

    subdomain: str = Field(
        ...,
        description="Tenant identifier (lowercase letters, digits and hyphens)",
        min_length=3,
        max_length=30,
    )
    company_name: str = Field(
        ..., description="Organization name", min_length=1, max_length=255
    )
    company_email: str = Field(
        ...,
        description="Organization contact e-mail",
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        max_length=255,
    )
    company_phone: str | None = Field(
        default=None, description="Organization phone number", max_length=50
    )
    plan: TenantPlan = Field(default=TenantPlan.FREE, description="Subscription plan")


class TenantResponse(BaseModel):
    """Response model for a tenant."""

    id: str = Field(..., description="Tenant ID (ULID format)")
    subdomain: str = Field(..., description="Tenant identifier")
    name: str = Field(..., description="Organization name")
    status: str = Field(..., description="Lifecycle status")
    plan: str = Field(..., description="Subscription plan")
    features: list[str] = Field(..., description="Enabled features")
    limits: dict[str, int] = Field(..., description="Plan limits, -1 is unlimited")
    trial_ends_at: datetime | None = Field(default=None, description="Trial end")
    days_until_trial_expires: int | None = Field(
        default=None, description="Whole days left in the trial"
    )

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantResponse:
        """Convert domain Tenant aggregate to API response.

        Args:
            tenant: Tenant domain aggregate

        Returns:
            TenantResponse
        """
        return cls(
            id=tenant.id.value,
            subdomain=tenant.identifier.value,
            name=tenant.name,
            status=tenant.status.value,
            plan=tenant.plan.value,
            features=sorted(feature.value for feature in tenant.features),
            limits=tenant.limits.as_dict(),
            trial_ends_at=tenant.trial_ends_at,
            days_until_trial_expires=tenant.days_until_trial_expires(),
        )


class AccessInfo(BaseModel):
    """Where a newly registered tenant is reachable."""

    url: str = Field(..., description="Tenant access URL")
    database: str = Field(..., description="Name of the tenant database")


class RegisterTenantResponse(BaseModel):
    """Response model for tenant registration."""

    tenant: TenantResponse
    access_info: AccessInfo

    @classmethod
    def from_domain(cls, tenant: Tenant, base_domain: str) -> RegisterTenantResponse:
        """Build the registration response for ``tenant``."""
        return cls(
            tenant=TenantResponse.from_domain(tenant),
            access_info=AccessInfo(
                url=f"https://{tenant.identifier.value}.{base_domain}",
                database=tenant.store.database_name,
            ),
        )


class TenantStatusUpdate(BaseModel):
    """Request model for changing a tenant's status."""

    status: str = Field(
        ..., description="New status: active, suspended or cancelled", max_length=20
    )


class Pagination(BaseModel):
    """Page position within a listing."""

    page: int
    limit: int
    total: int
    pages: int


class TenantListResponse(BaseModel):
    """Response model for a page of tenants."""

    tenants: list[TenantResponse]
    pagination: Pagination

    @classmethod
    def from_domain(
        cls, tenants: list[Tenant], page: int, limit: int
    ) -> TenantListResponse:
        """Cut page ``page`` of ``limit`` tenants out of the full listing."""
        start = (page - 1) * limit
        window = tenants[start : start + limit]
        return cls(
            tenants=[TenantResponse.from_domain(t) for t in window],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=len(tenants),
                pages=math.ceil(len(tenants) / limit),
            ),
        )
