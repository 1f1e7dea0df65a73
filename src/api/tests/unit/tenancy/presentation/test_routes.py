"""HTTP tests for the tenancy routes and dependencies.

The application state is populated with real registry, cache, resolver and
service objects over in-memory doubles, then exercised through
httpx.AsyncClient on an ASGITransport.
"""

import time
from typing import Annotated

import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI, Request
from httpx import ASGITransport, AsyncClient
from jose import jwt

from infrastructure.settings import TenancySettings, get_tenancy_settings
from shared_kernel.auth import DefaultJWTValidatorProbe, JWTValidator
from tenancy.application import (
    RequestTenantContext,
    ScopedDataHandleCache,
    TenantRegistry,
    TenantResolver,
)
from tenancy.application.services import TenantService
from tenancy.dependencies import (
    get_request_tenant_context,
    require_tenant_feature,
    require_within_limit,
)
from tenancy.domain import TenantPlan, TenantStatus
from tenancy.ports.exceptions import ConstructionFailureError
from tenancy.presentation import router


def count_products(request: Request) -> int:
    return request.app.state.product_count


def make_token(secret, **claims):
    payload = {"sub": "user-1", "exp": int(time.time()) + 3600, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


def admin_headers(secret):
    return {"Authorization": f"Bearer {make_token(secret, role='admin')}"}


@pytest.fixture
def app_directory(directory_factory, tenant_factory, expired_trial_tenant):
    return directory_factory(
        tenant_factory("empresa123"),
        tenant_factory("premium-co", plan=TenantPlan.PREMIUM),
        tenant_factory("suspendida", status=TenantStatus.SUSPENDED),
        expired_trial_tenant,
    )


@pytest.fixture
def test_app(app_directory, store_factory, jwt_secret, fixed_clock) -> FastAPI:
    """FastAPI app wired the way the lifespan wires it."""
    app = FastAPI()
    app.include_router(router)

    @app.get("/reports", dependencies=[Depends(require_tenant_feature("reports"))])
    async def reports():
        return {"ok": True}

    @app.post(
        "/products",
        status_code=201,
        dependencies=[Depends(require_within_limit("products", count_products))],
    )
    async def create_product():
        return {"ok": True}

    @app.get("/whoami")
    async def whoami(
        context: Annotated[RequestTenantContext, Depends(get_request_tenant_context)],
    ):
        return {"tenant": context.tenant_identifier, "source": context.source}

    registry = TenantRegistry(app_directory)
    cache = ScopedDataHandleCache(store_factory)
    validator = JWTValidator(secret=jwt_secret, probe=DefaultJWTValidatorProbe())

    app.state.product_count = 0
    app.state.handle_cache = cache
    app.state.jwt_validator = validator
    app.state.tenant_resolver = TenantResolver(
        registry, cache, validator, clock=fixed_clock
    )
    app.state.tenant_service = TenantService(
        app_directory, registry, cache, store_factory
    )
    app.dependency_overrides[get_tenancy_settings] = lambda: TenancySettings(
        base_domain="inventario.example"
    )
    return app


@pytest_asyncio.fixture
async def client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestCurrentTenant:
    """Tests for GET /tenants/current."""

    @pytest.mark.asyncio
    async def test_returns_header_tenant(self, client):
        """The resolved tenant's details are returned."""
        response = await client.get(
            "/tenants/current", headers={"X-Tenant-ID": "empresa123"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["subdomain"] == "empresa123"
        assert body["status"] == "active"

    @pytest.mark.asyncio
    async def test_requires_a_tenant(self, client):
        """Unscoped requests are rejected with TENANT_REQUIRED."""
        response = await client.get("/tenants/current")

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "TENANT_REQUIRED"

    @pytest.mark.asyncio
    async def test_unknown_tenant_is_404(self, client):
        """Unknown identifiers map to TENANT_NOT_FOUND."""
        response = await client.get("/tenants/current?tenant=ghost999")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "TENANT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_invalid_credential_is_401(self, client):
        """A bad bearer token maps to INVALID_CREDENTIAL."""
        response = await client.get(
            "/tenants/current?tenant=empresa123",
            headers={"Authorization": "Bearer nope"},
        )

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "INVALID_CREDENTIAL"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_suspended_tenant_is_403(self, client):
        """Suspended tenants map to TENANT_SUSPENDED."""
        response = await client.get(
            "/tenants/current", headers={"X-Tenant-ID": "suspendida"}
        )

        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "TENANT_SUSPENDED"

    @pytest.mark.asyncio
    async def test_expired_trial_is_402(self, client):
        """Expired trials map to TRIAL_EXPIRED with the days expired."""
        response = await client.get(
            "/tenants/current", headers={"X-Tenant-ID": "caducado"}
        )

        assert response.status_code == 402
        detail = response.json()["detail"]
        assert detail["code"] == "TRIAL_EXPIRED"
        assert detail["days_expired"] == 3

    @pytest.mark.asyncio
    async def test_store_unavailable_is_503(self, client, store_factory):
        """Construction failures are retryable 503s."""
        store_factory.failures["empresa123"] = OSError("connection refused")

        response = await client.get(
            "/tenants/current", headers={"X-Tenant-ID": "empresa123"}
        )

        assert response.status_code == 503
        assert response.json()["detail"]["code"] == "TENANT_STORE_UNAVAILABLE"
        assert "Retry-After" in response.headers

    @pytest.mark.asyncio
    async def test_claim_resolves_tenant(self, client, jwt_secret):
        """The tenantId claim of a verified token selects the tenant."""
        token = make_token(jwt_secret, tenantId="empresa123")

        response = await client.get(
            "/whoami", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.json() == {"tenant": "empresa123", "source": "credential"}


class TestFeatureGate:
    """Tests for require_tenant_feature."""

    @pytest.mark.asyncio
    async def test_plan_without_feature_is_403(self, client):
        """Free plans do not include reports."""
        response = await client.get("/reports", headers={"X-Tenant-ID": "empresa123"})

        assert response.status_code == 403
        detail = response.json()["detail"]
        assert detail["code"] == "FEATURE_NOT_AVAILABLE"
        assert detail["feature"] == "reports"

    @pytest.mark.asyncio
    async def test_plan_with_feature_passes(self, client):
        """Premium plans include reports."""
        response = await client.get("/reports", headers={"X-Tenant-ID": "premium-co"})

        assert response.status_code == 200

    def test_unknown_feature_name_rejected(self):
        """Feature names are validated when the dependency is built."""
        with pytest.raises(ValueError):
            require_tenant_feature("teleportation")


class TestLimitGate:
    """Tests for require_within_limit."""

    @pytest.mark.asyncio
    async def test_below_plan_limit_passes(self, client, test_app):
        test_app.state.product_count = 99

        response = await client.post(
            "/products", headers={"X-Tenant-ID": "empresa123"}
        )

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_at_plan_limit_is_403(self, client, test_app):
        """Free plans cap products at 100."""
        test_app.state.product_count = 100

        response = await client.post(
            "/products", headers={"X-Tenant-ID": "empresa123"}
        )

        assert response.status_code == 403
        detail = response.json()["detail"]
        assert detail["code"] == "LIMIT_EXCEEDED"
        assert detail["current"] == 100
        assert detail["limit"] == 100
        assert detail["plan"] == "free"

    @pytest.mark.asyncio
    async def test_higher_plan_has_higher_limit(self, client, test_app):
        test_app.state.product_count = 100

        response = await client.post(
            "/products", headers={"X-Tenant-ID": "premium-co"}
        )

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_requires_a_tenant(self, client):
        response = await client.post("/products")

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "TENANT_REQUIRED"

    def test_unknown_resource_rejected(self):
        with pytest.raises(ValueError):
            require_within_limit("spaceships", count_products)


class TestListTenants:
    """Tests for GET /tenants."""

    @pytest.mark.asyncio
    async def test_admin_lists_tenants(self, client, jwt_secret):
        response = await client.get("/tenants", headers=admin_headers(jwt_secret))

        assert response.status_code == 200
        body = response.json()
        assert [t["subdomain"] for t in body["tenants"]] == [
            "caducado",
            "empresa123",
            "premium-co",
            "suspendida",
        ]
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 4, "pages": 1}

    @pytest.mark.asyncio
    async def test_filters_by_status_and_plan(self, client, jwt_secret):
        suspended = await client.get(
            "/tenants?status=suspended", headers=admin_headers(jwt_secret)
        )
        premium = await client.get(
            "/tenants?plan=premium", headers=admin_headers(jwt_secret)
        )

        assert [t["subdomain"] for t in suspended.json()["tenants"]] == ["suspendida"]
        assert [t["subdomain"] for t in premium.json()["tenants"]] == ["premium-co"]

    @pytest.mark.asyncio
    async def test_paginates(self, client, jwt_secret):
        response = await client.get(
            "/tenants?page=2&limit=3", headers=admin_headers(jwt_secret)
        )

        body = response.json()
        assert [t["subdomain"] for t in body["tenants"]] == ["suspendida"]
        assert body["pagination"] == {"page": 2, "limit": 3, "total": 4, "pages": 2}

    @pytest.mark.asyncio
    async def test_unknown_status_filter_is_422(self, client, jwt_secret):
        response = await client.get(
            "/tenants?status=archived", headers=admin_headers(jwt_secret)
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_requires_admin_role(self, client, jwt_secret):
        token = make_token(jwt_secret, role="user")

        response = await client.get(
            "/tenants", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 403


class TestChangeTenantStatus:
    """Tests for PUT /tenants/{identifier}/status."""

    @pytest.mark.asyncio
    async def test_reactivated_tenant_is_served_again(self, client, jwt_secret):
        """A suspended tenant refused earlier resolves once reactivated."""
        before = await client.get(
            "/tenants/current", headers={"X-Tenant-ID": "suspendida"}
        )
        assert before.status_code == 403

        response = await client.put(
            "/tenants/suspendida/status",
            json={"status": "active"},
            headers=admin_headers(jwt_secret),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "active"
        after = await client.get(
            "/tenants/current", headers={"X-Tenant-ID": "suspendida"}
        )
        assert after.status_code == 200

    @pytest.mark.asyncio
    async def test_cancellation_closes_cached_handle(
        self, client, jwt_secret, store_factory
    ):
        await client.get("/tenants/current", headers={"X-Tenant-ID": "empresa123"})

        response = await client.put(
            "/tenants/empresa123/status",
            json={"status": "cancelled"},
            headers=admin_headers(jwt_secret),
        )

        assert response.status_code == 200
        assert store_factory.handles[0].closed is True

    @pytest.mark.asyncio
    async def test_trial_status_is_400(self, client, jwt_secret):
        response = await client.put(
            "/tenants/empresa123/status",
            json={"status": "trial"},
            headers=admin_headers(jwt_secret),
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_STATUS"

    @pytest.mark.asyncio
    async def test_unknown_tenant_is_404(self, client, jwt_secret):
        response = await client.put(
            "/tenants/ghost999/status",
            json={"status": "active"},
            headers=admin_headers(jwt_secret),
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_requires_bearer_token(self, client):
        response = await client.put(
            "/tenants/empresa123/status", json={"status": "active"}
        )

        assert response.status_code == 401


class TestRegisterTenant:
    """Tests for POST /tenants/register."""

    @pytest.mark.asyncio
    async def test_registers_tenant(self, client, store_factory, app_directory):
        """Registration returns the tenant and where to reach it."""
        response = await client.post(
            "/tenants/register",
            json={
                "subdomain": "nueva-tienda",
                "company_name": "Nueva Tienda",
                "company_email": "hola@nueva.example",
                "plan": "basic",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["tenant"]["subdomain"] == "nueva-tienda"
        assert body["tenant"]["status"] == "trial"
        assert body["tenant"]["days_until_trial_expires"] == 14
        assert body["access_info"]["url"] == "https://nueva-tienda.inventario.example"
        assert body["access_info"]["database"] in store_factory.provisioned
        assert "nueva-tienda" in app_directory.tenants

    @pytest.mark.asyncio
    async def test_duplicate_is_409(self, client):
        """Registering a taken identifier conflicts."""
        response = await client.post(
            "/tenants/register",
            json={
                "subdomain": "empresa123",
                "company_name": "Copy",
                "company_email": "a@b.co",
            },
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_subdomain_is_422(self, client):
        """Identifiers with forbidden characters are rejected."""
        response = await client.post(
            "/tenants/register",
            json={
                "subdomain": "Bad_Name",
                "company_name": "Bad",
                "company_email": "a@b.co",
            },
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_provisioning_failure_is_503(self, client, store_factory):
        """A database that cannot be created is a retryable failure."""
        store_factory.provision_failure = ConstructionFailureError("nueva", "denied")

        response = await client.post(
            "/tenants/register",
            json={
                "subdomain": "nueva",
                "company_name": "Nueva",
                "company_email": "a@b.co",
            },
        )

        assert response.status_code == 503


class TestDeactivateTenant:
    """Tests for POST /tenants/{identifier}/deactivate."""

    @pytest.mark.asyncio
    async def test_admin_deactivates_tenant(self, client, jwt_secret, store_factory):
        """An admin token suspends the tenant and later requests are refused."""
        await client.get("/tenants/current", headers={"X-Tenant-ID": "empresa123"})
        token = make_token(jwt_secret, role="admin")

        response = await client.post(
            "/tenants/empresa123/deactivate",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "suspended"
        assert store_factory.handles[0].closed is True

        after = await client.get(
            "/tenants/current", headers={"X-Tenant-ID": "empresa123"}
        )
        assert after.status_code == 403

    @pytest.mark.asyncio
    async def test_requires_bearer_token(self, client):
        """Anonymous callers are rejected."""
        response = await client.post("/tenants/empresa123/deactivate")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_requires_admin_role(self, client, jwt_secret):
        """Non-admin tokens are forbidden."""
        token = make_token(jwt_secret, role="user")

        response = await client.post(
            "/tenants/empresa123/deactivate",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_tenant_is_404(self, client, jwt_secret):
        """Deactivating an unknown tenant is a 404."""
        token = make_token(jwt_secret, role="admin")

        response = await client.post(
            "/tenants/ghost999/deactivate",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 404
