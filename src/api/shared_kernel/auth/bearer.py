"""Bearer credential extraction from the Authorization header."""

from __future__ import annotations

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a ``Bearer`` Authorization header.

    Only the Bearer scheme carries a credential; any other scheme (or no
    header at all) yields None. A Bearer header with nothing after the
    scheme yields an empty string so callers still treat it as a
    credential that fails verification.

    Args:
        authorization: Raw Authorization header value, or None.

    Returns:
        The token string, "" for an empty Bearer credential, or None.
    """
    if authorization is None:
        return None

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None

    return token.strip()
