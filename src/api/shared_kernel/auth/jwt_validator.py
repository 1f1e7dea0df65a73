"""JWT validation module for bearer credentials.

Verifies HMAC-signed tokens issued by the backend and returns an explicitly
typed claims object. Claims are never read from an unverified decode.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe


@dataclass(frozen=True)
class TokenClaims:
    """Verified JWT claims.

    Only produced by ``JWTValidator.verify`` after signature and expiry
    checks have passed.

    Attributes:
        sub: Subject (user id), if the token carries one.
        tenant_id: Tenant identifier claim, if present.
        role: Caller role claim (e.g. "admin"), if present.
        expires_at: Expiry instant of the token.
    """

    sub: str | None
    tenant_id: str | None
    role: str | None
    expires_at: datetime


class InvalidTokenError(Exception):
    """Raised when JWT validation fails."""

    pass


class JWTValidator:
    """Validates HMAC-signed JWT tokens with a shared secret.

    Validates token signature and expiry, and issuer/audience when they
    are configured.
    """

    def __init__(
        self,
        secret: str,
        probe: JWTValidatorProbe,
        algorithm: str = "HS256",
        issuer: str | None = None,
        audience: str | None = None,
        tenant_claim: str = "tenantId",
        role_claim: str = "role",
    ):
        """Initialize the JWT validator.

        Args:
            secret: Shared signing secret.
            probe: Observability probe for logging events.
            algorithm: Accepted signing algorithm (default: HS256).
            issuer: Expected ``iss`` claim; not checked when None.
            audience: Expected ``aud`` claim; not checked when None.
            tenant_claim: Claim carrying the tenant identifier (default: tenantId).
            role_claim: Claim carrying the caller role (default: role).
        """
        self._secret = secret
        self._probe = probe
        self._algorithm = algorithm
        self._issuer = issuer
        self._audience = audience
        self._tenant_claim = tenant_claim
        self._role_claim = role_claim

    async def verify(self, token: str) -> TokenClaims:
        """Verify a JWT and return its typed claims.

        Args:
            token: The JWT token string.

        Returns:
            TokenClaims containing the verified claims.

        Raises:
            InvalidTokenError: If token is malformed, expired, or verification fails.
        """
        if not self._secret:
            self._probe.token_validation_failed(reason="No signing secret configured")
            raise InvalidTokenError("Token verification is not configured")

        # First, do a quick check for malformed tokens
        try:
            unverified_header = jwt.get_unverified_header(token)
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"Malformed token: {e}")
            raise InvalidTokenError(f"Invalid token format: {e}") from e

        if not unverified_header:
            self._probe.token_validation_failed(reason="Missing token header")
            raise InvalidTokenError("Invalid token: missing header")

        try:
            claims = jwt.decode(
                token=token,
                key=self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "verify_signature": True,
                    "verify_aud": self._audience is not None,
                    "verify_iss": self._issuer is not None,
                    "verify_exp": True,
                    "verify_iat": True,
                    "require_exp": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            error_msg = str(e).lower()
            if "audience" in error_msg:
                self._probe.token_validation_failed(reason="Invalid audience")
                raise InvalidTokenError("Invalid audience claim") from e
            if "issuer" in error_msg:
                self._probe.token_validation_failed(reason="Invalid issuer")
                raise InvalidTokenError("Invalid issuer claim") from e
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            error_msg = str(e).lower()
            if "signature" in error_msg:
                self._probe.token_validation_failed(reason="Invalid signature")
                raise InvalidTokenError("Invalid token signature") from e
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        token_claims = TokenClaims(
            sub=self._optional_str(claims, "sub"),
            tenant_id=self._optional_str(claims, self._tenant_claim),
            role=self._optional_str(claims, self._role_claim),
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
        )

        self._probe.token_validated(
            subject=token_claims.sub,
            tenant_id=token_claims.tenant_id,
        )
        return token_claims

    def _optional_str(self, claims: dict[str, Any], name: str) -> str | None:
        """Read a string claim, rejecting values of any other type."""
        value = claims.get(name)
        if value is None:
            return None
        if not isinstance(value, (str, int)) or isinstance(value, bool):
            self._probe.token_validation_failed(reason=f"Malformed {name} claim")
            raise InvalidTokenError(f"Claim '{name}' must be a string")
        return str(value)
