"""SQLAlchemy ORM model for the tenant directory.

Stores one row per tenant in the central directory database. The row
records where the tenant's isolated store lives, never the tenant's
business data.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from tenancy.domain import (
    Feature,
    StoreLocation,
    Tenant,
    TenantId,
    TenantIdentifier,
    TenantLimits,
    TenantPlan,
    TenantStatus,
)


class TenantModel(Base, TimestampMixin):
    """ORM model for the tenants table.

    Note: Tenant identifiers are globally unique across the entire system.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    identifier: Mapped[str] = mapped_column(
        String(30), nullable=False, unique=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_email: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    plan: Mapped[str] = mapped_column(String(20), nullable=False)
    database_name: Mapped[str] = mapped_column(String(63), nullable=False)
    connection_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_shared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    trial_ends_at: Mapped[datetime | None] = mapped_column(nullable=True)
    limits: Mapped[dict[str, Any]] = mapped_column(nullable=False)
    features: Mapped[dict[str, Any]] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantModel(id={self.id}, identifier={self.identifier})>"

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantModel:
        """Build a row from a Tenant aggregate."""
        model = cls(id=tenant.id.value, identifier=tenant.identifier.value)
        model.apply(tenant)
        if tenant.created_at is not None:
            model.created_at = tenant.created_at
        return model

    def apply(self, tenant: Tenant) -> None:
        """Copy the mutable fields of ``tenant`` onto this row."""
        self.name = tenant.name
        self.company_email = tenant.company_email
        self.status = tenant.status.value
        self.plan = tenant.plan.value
        self.database_name = tenant.store.database_name
        self.connection_url = tenant.store.connection_url
        self.is_shared = tenant.store.is_shared
        self.trial_ends_at = tenant.trial_ends_at
        self.limits = tenant.limits.as_dict()
        self.features = {feature.value: True for feature in sorted(tenant.features)}

    def to_domain(self) -> Tenant:
        """Reconstitute the Tenant aggregate from this row."""
        return Tenant(
            id=TenantId(value=self.id),
            identifier=TenantIdentifier(value=self.identifier),
            name=self.name,
            company_email=self.company_email,
            store=StoreLocation(
                database_name=self.database_name,
                connection_url=self.connection_url,
                is_shared=self.is_shared,
            ),
            status=TenantStatus(self.status),
            plan=TenantPlan(self.plan),
            limits=TenantLimits(**self.limits),
            features=frozenset(
                Feature(name) for name, enabled in self.features.items() if enabled
            ),
            trial_ends_at=self.trial_ends_at,
            created_at=self.created_at,
        )
