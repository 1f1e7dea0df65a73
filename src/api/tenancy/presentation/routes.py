"""HTTP routes for tenant registration and administration."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from infrastructure.settings import TenancySettings, get_tenancy_settings
from shared_kernel.auth import TokenClaims
from tenancy.application.services import TenantService
from tenancy.dependencies import (
    get_current_tenant,
    get_tenant_service,
    require_admin,
    to_http_exception,
)
from tenancy.dependencies.tenant_context import error_detail
from tenancy.domain import (
    InvalidTenantIdentifierError,
    InvalidTenantStatusError,
    Tenant,
    TenantPlan,
    TenantStatus,
)
from tenancy.ports.exceptions import (
    ConstructionFailureError,
    DuplicateTenantIdentifierError,
    UnknownTenantError,
)
from tenancy.presentation.models import (
    RegisterTenantRequest,
    RegisterTenantResponse,
    TenantListResponse,
    TenantResponse,
    TenantStatusUpdate,
)

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
)
async def register_tenant(
    request: RegisterTenantRequest,
    service: Annotated[TenantService, Depends(get_tenant_service)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> RegisterTenantResponse:
    """Register a new tenant and provision its database.

    This endpoint is unscoped: the tenant does not exist yet, so no
    tenant resolution takes place.

    Raises:
        HTTPException: 422 if the identifier is malformed
        HTTPException: 409 if the identifier is already registered
        HTTPException: 503 if the tenant database cannot be created
    """
    try:
        tenant = await service.register_tenant(
            identifier=request.subdomain,
            name=request.company_name,
            company_email=request.company_email,
            plan=request.plan,
        )
    except InvalidTenantIdentifierError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=error_detail("INVALID_SUBDOMAIN", str(e)),
        ) from e
    except DuplicateTenantIdentifierError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=error_detail("SUBDOMAIN_TAKEN", "Subdomain is already registered"),
        ) from e
    except ConstructionFailureError as e:
        raise to_http_exception(e) from e

    return RegisterTenantResponse.from_domain(tenant, base_domain=settings.base_domain)


@router.get("/current")
async def read_current_tenant(
    tenant: Annotated[Tenant, Depends(get_current_tenant)],
) -> TenantResponse:
    """Get the tenant the request resolved to."""
    return TenantResponse.from_domain(tenant)


@router.get("")
async def list_tenants(
    _: Annotated[TokenClaims, Depends(require_admin)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    tenant_status: Annotated[TenantStatus | None, Query(alias="status")] = None,
    plan: TenantPlan | None = None,
) -> TenantListResponse:
    """List tenants, optionally filtered by status and plan.

    Requires a bearer token with the admin role.
    """
    tenants = await service.list_tenants(status=tenant_status, plan=plan)
    return TenantListResponse.from_domain(tenants, page=page, limit=limit)


@router.put("/{identifier}/status")
async def change_tenant_status(
    identifier: str,
    request: TenantStatusUpdate,
    _: Annotated[TokenClaims, Depends(require_admin)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Set a tenant's status to active, suspended or cancelled.

    The tenant's registry entry and cached data handle are released, so
    the next request sees the new status.

    Requires a bearer token with the admin role.

    Raises:
        HTTPException: 400 if the status cannot be assigned
        HTTPException: 404 if the tenant does not exist
    """
    try:
        tenant = await service.change_status(identifier, request.status)
    except InvalidTenantStatusError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail("INVALID_STATUS", str(e)),
        ) from e
    except UnknownTenantError as e:
        raise to_http_exception(e) from e

    return TenantResponse.from_domain(tenant)


@router.post("/{identifier}/deactivate")
async def deactivate_tenant(
    identifier: str,
    _: Annotated[TokenClaims, Depends(require_admin)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Suspend a tenant and release its cached data handle.

    Requires a bearer token with the admin role.

    Raises:
        HTTPException: 404 if the tenant does not exist
    """
    try:
        tenant = await service.deactivate_tenant(identifier)
    except UnknownTenantError as e:
        raise to_http_exception(e) from e

    return TenantResponse.from_domain(tenant)
