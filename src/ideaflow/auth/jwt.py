"""JWT validation and role claim extraction."""

from __future__ import annotations

import logging
from typing import Any

import jwt

logger = logging.getLogger(__name__)

ROLE_CLAIM = "role"


class TokenExpiredError(Exception):
    """Raised when a JWT token has expired."""


class TokenInvalidError(Exception):
    """Raised when a JWT token is invalid."""


def verify_token(token: str, secret: str) -> dict[str, Any]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, secret, algorithms=["HS256"])
        return payload
    except jwt.ExpiredSignatureError as e:
        logger.warning("Token expired: %s", e)
        raise TokenExpiredError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token: %s", e)
        raise TokenInvalidError("Token is invalid") from e


def role_from_claims(payload: dict[str, Any]) -> str | None:
    """Return the free-text role claim, or None when absent or not a string."""
    role = payload.get(ROLE_CLAIM)
    if not isinstance(role, str):
        return None
    return role
