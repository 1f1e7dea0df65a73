"""Request tenant context FastAPI dependencies.

Resolves the tenant of each request through the ``TenantResolver`` and
translates resolution failures into HTTP errors.

Usage in FastAPI routes:
    @router.get("/example")
    async def example(
        context: Annotated[RequestTenantContext, Depends(require_tenant)],
    ):
        async with context.data_handle.session() as session:
            ...
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from tenancy.application import RequestTenantContext, TenantResolver
from tenancy.dependencies.tenant import get_tenant_resolver
from tenancy.domain import Feature, LimitKind, Tenant
from tenancy.ports.exceptions import (
    ConstructionFailureError,
    InvalidCredentialError,
    TenantResolutionError,
    TenantSuspendedError,
    TrialExpiredError,
    UnknownTenantError,
)

RETRY_AFTER_SECONDS = 5


def error_detail(code: str, message: str, **extra: object) -> dict[str, object]:
    """Build the ``detail`` body shared by every tenancy HTTP error."""
    return {"code": code, "message": message, **extra}


def to_http_exception(error: TenantResolutionError) -> HTTPException:
    """Translate a resolution failure into its HTTP response.

    Args:
        error: The failure raised by the resolver

    Returns:
        HTTPException carrying a ``{"code", "message"}`` detail
    """
    if isinstance(error, UnknownTenantError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_detail("TENANT_NOT_FOUND", "Tenant not found"),
        )
    if isinstance(error, InvalidCredentialError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail("INVALID_CREDENTIAL", "Invalid bearer credential"),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(error, ConstructionFailureError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=error_detail(
                "TENANT_STORE_UNAVAILABLE",
                "Tenant data store is temporarily unavailable",
            ),
            headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
        )
    if isinstance(error, TenantSuspendedError):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_detail(
                "TENANT_SUSPENDED",
                "Tenant account is suspended. Please contact support.",
            ),
        )
    if isinstance(error, TrialExpiredError):
        return HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=error_detail(
                "TRIAL_EXPIRED",
                "Trial period has expired. Please upgrade your plan.",
                days_expired=error.days_expired,
            ),
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error_detail("TENANT_RESOLUTION_FAILED", str(error)),
    )


async def get_request_tenant_context(
    request: Request,
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
) -> RequestTenantContext:
    """Resolve the request's tenant context once per request.

    The result is stored on ``request.state.tenant_context``; later
    lookups in the same request reuse it.

    Raises:
        HTTPException: If resolution fails (see ``to_http_exception``)
    """
    existing = getattr(request.state, "tenant_context", None)
    if isinstance(existing, RequestTenantContext):
        return existing

    try:
        context = await resolver.resolve(request)
    except TenantResolutionError as e:
        raise to_http_exception(e) from e

    request.state.tenant_context = context
    return context


def _tenant_required() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error_detail(
            "TENANT_REQUIRED",
            "Tenant identification required. Provide the X-Tenant-ID "
            "header, the tenant query parameter, or a token with a "
            "tenantId claim.",
        ),
    )


async def require_tenant(
    context: Annotated[RequestTenantContext, Depends(get_request_tenant_context)],
) -> RequestTenantContext:
    """Require the request to be bound to a tenant.

    Raises:
        HTTPException 400: If no strategy produced a tenant
    """
    if not context.is_scoped:
        raise _tenant_required()
    return context


async def get_current_tenant(
    context: Annotated[RequestTenantContext, Depends(get_request_tenant_context)],
) -> Tenant:
    """Get the tenant the request is bound to.

    Raises:
        HTTPException 400: If no strategy produced a tenant
    """
    if context.tenant is None:
        raise _tenant_required()
    return context.tenant


def require_tenant_feature(
    feature: Feature | str,
) -> Callable[..., Awaitable[Tenant]]:
    """Build a dependency requiring the tenant's plan to enable ``feature``.

    Example:
        @router.get("/reports", dependencies=[Depends(require_tenant_feature("reports"))])

    Raises:
        ValueError: If ``feature`` is not a known feature name
    """
    required = Feature(feature)

    async def _require_feature(
        tenant: Annotated[Tenant, Depends(get_current_tenant)],
    ) -> Tenant:
        if not tenant.has_feature(required):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=error_detail(
                    "FEATURE_NOT_AVAILABLE",
                    f"Feature '{required.value}' is not available in your plan",
                    feature=required.value,
                    plan=tenant.plan.value,
                ),
            )
        return tenant

    return _require_feature


def require_within_limit(
    kind: LimitKind | str,
    count: Callable[..., Awaitable[int] | int],
) -> Callable[..., Awaitable[Tenant]]:
    """Build a dependency refusing to create one more ``kind`` past the plan cap.

    ``count`` is itself a FastAPI dependency returning how many ``kind``
    records the tenant already has; it typically depends on
    ``require_tenant`` and counts through the tenant's data handle.

    Example:
        @router.post(
            "/products",
            dependencies=[Depends(require_within_limit("products", count_products))],
        )

    Raises:
        ValueError: If ``kind`` is not a known resource name
    """
    limited = LimitKind(kind)

    async def _require_within_limit(
        tenant: Annotated[Tenant, Depends(get_current_tenant)],
        current: int = Depends(count),
    ) -> Tenant:
        if not tenant.within_limit(limited, current):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=error_detail(
                    "LIMIT_EXCEEDED",
                    f"Limit of {limited.value} reached for your plan",
                    current=current,
                    limit=tenant.limits.limit_for(limited),
                    plan=tenant.plan.value,
                ),
            )
        return tenant

    return _require_within_limit
