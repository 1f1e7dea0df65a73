"""Credential verifier port.

Implemented by ``shared_kernel.auth.JWTValidator``; declared here so the
resolver depends on the capability rather than on python-jose.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared_kernel.auth import TokenClaims


@runtime_checkable
class ICredentialVerifier(Protocol):
    """Verifies bearer credentials."""

    async def verify(self, token: str) -> TokenClaims:
        """Verify a token and return its claims.

        Raises:
            InvalidTokenError: If the token is malformed, expired, or its
                signature does not verify.
        """
        ...
