"""FastAPI dependencies for authentication and idempotency."""

from typing import Optional

import structlog
from fastapi import Depends, Header

from .exceptions import AuthenticationError, AuthorizationError, ValidationError
from .security import ADMIN_ROLE, decode_access_token


def _extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationError(detail="Authorization header missing")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise AuthenticationError(detail="Invalid authorization header format")

    if scheme.lower() != "bearer":
        raise AuthenticationError(detail="Invalid authentication scheme")

    return token


async def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> dict:
    """
    Authentication dependency that validates Bearer tokens.

    Args:
        authorization: Authorization header with Bearer token

    Returns:
        dict: User information from validated token

    Raises:
        AuthenticationError: If token is invalid or missing
    """
    payload = decode_access_token(_extract_bearer_token(authorization))

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError(detail="Invalid token subject")

    structlog.contextvars.bind_contextvars(user_id=user_id)

    return {
        "user_id": user_id,
        "email": payload.get("email"),
        "roles": payload.get("roles", []),
    }


async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """Authorization dependency for the admin surface."""
    if ADMIN_ROLE not in current_user["roles"]:
        raise AuthorizationError(
            detail="Admin session required",
            required_permissions=[ADMIN_ROLE],
        )
    return current_user


async def get_idempotency_key(
    idempotency_key: str = Header(..., alias="Idempotency-Key")
) -> str:
    """
    Extract and validate the idempotency key from request headers.

    Raises:
        ValidationError: If the key is blank or longer than 255 characters
    """
    idempotency_key = idempotency_key.strip()
    if not idempotency_key or len(idempotency_key) > 255:
        raise ValidationError(detail="Idempotency key must be between 1 and 255 characters")
    return idempotency_key

