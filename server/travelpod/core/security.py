"""Password hashing and bearer token helpers."""

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Optional

import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from .config import settings
from .exceptions import AuthenticationError

JWT_ALGORITHM = "HS256"
ADMIN_ROLE = "admin"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Return a salted hash suitable for storage."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    """Check a plain password against a stored hash."""
    if not password_hash:
        return False
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        # Stored value is not a recognised hash
        return False


def create_access_token(
    subject: Any,
    email: Optional[str] = None,
    roles: Iterable[str] = (),
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed bearer token.

    Args:
        subject: Token subject, the user id
        email: Email address carried as a claim
        roles: Role names granted to the bearer
        expires_delta: Token lifetime, defaults to the customer token TTL

    Returns:
        str: Encoded JWT
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_ttl_minutes)

    issued_at = datetime.utcnow()
    payload: Dict[str, Any] = {
        "sub": str(subject),
        "email": email,
        "roles": list(roles),
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(payload, settings.bearer_token_secret, algorithm=JWT_ALGORITHM)


def create_admin_token(user_id: int, email: Optional[str] = None) -> str:
    """Create an admin session token with the fixed admin session lifetime."""
    return create_access_token(
        subject=user_id,
        email=email,
        roles=[ADMIN_ROLE],
        expires_delta=timedelta(hours=settings.admin_session_ttl_hours),
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a bearer token.

    Raises:
        AuthenticationError: If the token is malformed, tampered with or expired
    """
    try:
        payload = jwt.decode(token, settings.bearer_token_secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(detail="Token has expired")
    except PyJWTError as e:
        raise AuthenticationError(detail=f"Token validation failed: {str(e)}")

    if payload.get("sub") is None:
        raise AuthenticationError(detail="Invalid token payload")

    return payload
