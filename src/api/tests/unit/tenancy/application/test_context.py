"""Unit tests for RequestTenantContext."""

from dataclasses import FrozenInstanceError

import pytest

from tenancy.application import RequestTenantContext


class FakeHandle:
    def __init__(self, tenant_identifier: str):
        self.tenant_identifier = tenant_identifier
        self.database_name = f"tenant_{tenant_identifier}_1"


class TestRequestTenantContext:
    """Tests for context invariants."""

    def test_unscoped_context_has_no_tenant_or_handle(self):
        """unscoped() carries neither tenant nor handle."""
        context = RequestTenantContext.unscoped()

        assert context.is_scoped is False
        assert context.tenant_identifier is None
        assert context.source is None

    def test_scoped_context_exposes_identifier(self, active_tenant):
        """A scoped context reports its tenant identifier."""
        context = RequestTenantContext(
            tenant=active_tenant,
            data_handle=FakeHandle("empresa123"),
            source="header",
        )

        assert context.is_scoped is True
        assert context.tenant_identifier == "empresa123"

    def test_tenant_without_handle_rejected(self, active_tenant):
        """Tenant and handle must be set together."""
        with pytest.raises(ValueError, match="set together"):
            RequestTenantContext(tenant=active_tenant)

    def test_handle_without_tenant_rejected(self):
        """A handle cannot be attached to an unscoped context."""
        with pytest.raises(ValueError, match="set together"):
            RequestTenantContext(data_handle=FakeHandle("empresa123"))

    def test_handle_of_another_tenant_rejected(self, active_tenant):
        """The handle must belong to the resolved tenant."""
        with pytest.raises(ValueError, match="different tenant"):
            RequestTenantContext(
                tenant=active_tenant,
                data_handle=FakeHandle("otra-empresa"),
            )

    def test_context_is_immutable(self, active_tenant):
        """The bound tenant cannot be swapped mid-request."""
        context = RequestTenantContext(
            tenant=active_tenant, data_handle=FakeHandle("empresa123")
        )

        with pytest.raises(FrozenInstanceError):
            context.tenant = None  # type: ignore[misc]
