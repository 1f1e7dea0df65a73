"""Tenant aggregate for the tenancy context."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

from tenancy.domain.exceptions import InvalidTenantStatusError
from tenancy.domain.value_objects import (
    PLAN_FEATURES,
    Feature,
    LimitKind,
    StoreLocation,
    TenantId,
    TenantIdentifier,
    TenantLimits,
    TenantPlan,
    TenantStatus,
)

DEFAULT_TRIAL_DAYS = 14

ASSIGNABLE_STATUSES = frozenset(
    {TenantStatus.ACTIVE, TenantStatus.SUSPENDED, TenantStatus.CANCELLED}
)


@dataclass(frozen=True)
class Tenant:
    """Tenant aggregate representing an organization in the system.

    Tenants are the top-level isolation boundary: each one owns a separate
    database that no other tenant's requests may reach.

    Tenant records are immutable. State transitions such as suspension
    return a new record, so a Tenant handed to concurrent requests is
    never observed half-updated.

    Business rules:
    - Identifiers are globally unique and never change after registration
    - A tenant is active while its status is ``active`` or ``trial``
    - A trial expires once ``trial_ends_at`` is in the past
    """

    id: TenantId
    identifier: TenantIdentifier
    name: str
    company_email: str
    store: StoreLocation
    status: TenantStatus = TenantStatus.TRIAL
    plan: TenantPlan = TenantPlan.FREE
    limits: TenantLimits = field(default_factory=TenantLimits)
    features: frozenset[Feature] = PLAN_FEATURES[TenantPlan.FREE]
    trial_ends_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def create(
        cls,
        identifier: TenantIdentifier,
        name: str,
        company_email: str,
        plan: TenantPlan = TenantPlan.FREE,
        trial_days: int = DEFAULT_TRIAL_DAYS,
        connection_url: str | None = None,
        now: datetime | None = None,
    ) -> Tenant:
        """Factory method for registering a new tenant.

        New tenants start in ``trial`` status with the plan's default limits
        and features, and a store location derived from the identifier and
        the creation instant.

        Args:
            identifier: Public tenant slug
            name: Display name of the organization
            company_email: Contact e-mail, stored lowercase
            plan: Subscription plan
            trial_days: Length of the trial period
            connection_url: Dedicated database server, None to share the
                directory's server
            now: Creation instant (defaults to the current UTC time)

        Returns:
            A new Tenant in trial status
        """
        created_at = now or datetime.now(UTC)
        return cls(
            id=TenantId.generate(),
            identifier=identifier,
            name=name.strip(),
            company_email=company_email.strip().lower(),
            store=StoreLocation.for_identifier(
                identifier,
                created_at_ms=int(created_at.timestamp() * 1000),
                connection_url=connection_url,
            ),
            status=TenantStatus.TRIAL,
            plan=plan,
            limits=TenantLimits.for_plan(plan),
            features=PLAN_FEATURES[plan],
            trial_ends_at=created_at + timedelta(days=trial_days),
            created_at=created_at,
        )

    @property
    def is_active(self) -> bool:
        """Whether the tenant may serve requests (active or in trial)."""
        return self.status in (TenantStatus.ACTIVE, TenantStatus.TRIAL)

    def is_trial_expired(self, now: datetime | None = None) -> bool:
        """Whether a trial tenant's trial period has ended."""
        if self.status != TenantStatus.TRIAL or self.trial_ends_at is None:
            return False
        return self.trial_ends_at < (now or datetime.now(UTC))

    def days_until_trial_expires(self, now: datetime | None = None) -> int | None:
        """Whole days left in the trial, rounded up; 0 once expired.

        Returns None for tenants that are not in trial.
        """
        if self.status != TenantStatus.TRIAL or self.trial_ends_at is None:
            return None
        remaining = self.trial_ends_at - (now or datetime.now(UTC))
        return max(0, math.ceil(remaining.total_seconds() / 86400))

    def days_since_trial_expired(self, now: datetime | None = None) -> int:
        """Whole days elapsed since the trial ended, rounded up."""
        if self.trial_ends_at is None:
            return 0
        elapsed = (now or datetime.now(UTC)) - self.trial_ends_at
        return max(0, math.ceil(elapsed.total_seconds() / 86400))

    def has_feature(self, feature: Feature) -> bool:
        """Whether the tenant's plan enables ``feature``."""
        return feature in self.features

    def within_limit(self, kind: LimitKind, current: int) -> bool:
        """Whether one more ``kind`` may be created given ``current`` count."""
        return self.limits.allows(kind, current)

    def with_status(self, status: TenantStatus | str) -> Tenant:
        """Return a copy of this tenant moved to ``status``.

        Raises:
            InvalidTenantStatusError: If ``status`` is unknown or cannot be
                assigned after registration
        """
        try:
            target = TenantStatus(status)
        except ValueError as e:
            raise InvalidTenantStatusError(f"Unknown tenant status: {status}") from e
        if target not in ASSIGNABLE_STATUSES:
            raise InvalidTenantStatusError(f"Status cannot be assigned: {target.value}")
        return replace(self, status=target)

    def suspended(self) -> Tenant:
        """Return a copy of this tenant in ``suspended`` status."""
        return self.with_status(TenantStatus.SUSPENDED)
