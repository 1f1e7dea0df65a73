"""Authentication shared kernel module."""

from shared_kernel.auth.bearer import extract_bearer_token
from shared_kernel.auth.jwt_validator import (
    InvalidTokenError,
    JWTValidator,
    TokenClaims,
)
from shared_kernel.auth.observability import (
    DefaultJWTValidatorProbe,
    JWTValidatorProbe,
)

__all__ = [
    "InvalidTokenError",
    "JWTValidator",
    "JWTValidatorProbe",
    "DefaultJWTValidatorProbe",
    "TokenClaims",
    "extract_bearer_token",
]
