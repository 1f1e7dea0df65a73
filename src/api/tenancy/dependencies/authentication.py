"""Bearer authentication dependencies for tenant administration routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from shared_kernel.auth import (
    InvalidTokenError,
    JWTValidator,
    TokenClaims,
    extract_bearer_token,
)
from tenancy.dependencies.tenant_context import error_detail

ADMIN_ROLE = "admin"


def get_jwt_validator(request: Request) -> JWTValidator:
    """Get the application's JWTValidator."""
    return request.app.state.jwt_validator


async def get_bearer_claims(
    request: Request,
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
) -> TokenClaims:
    """Verify the request's bearer token and return its claims.

    Raises:
        HTTPException 401: If the token is missing or invalid
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail("AUTHENTICATION_REQUIRED", "Bearer token required"),
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await validator.verify(token)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail("INVALID_CREDENTIAL", "Invalid bearer credential"),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def require_admin(
    claims: Annotated[TokenClaims, Depends(get_bearer_claims)],
) -> TokenClaims:
    """Require a verified bearer token with the admin role.

    Raises:
        HTTPException 403: If the token's role is not admin
    """
    if claims.role != ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_detail("FORBIDDEN", "Administrator role required"),
        )
    return claims
