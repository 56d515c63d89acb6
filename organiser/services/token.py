"""HS256 JWT access tokens and opaque refresh tokens."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt, JWTError

from organiser.config.settings import settings


def create_token(data: dict[str, Any], expires_delta: timedelta = None) -> str:
    """
    Create an HS256-signed JWT token.

    Args:
        data: Claims to include in the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
    })

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an HS256-signed JWT token.

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.JWTClaimsError as e:
        raise JWTError(f"Invalid token claims: {e}")
    except JWTError as e:
        raise JWTError(f"Invalid token: {e}")


def should_refresh_token(payload: dict[str, Any]) -> bool:
    """Check if token should be refreshed (less than 50% lifetime remaining)."""
    exp = payload.get("exp")
    iat = payload.get("iat")

    if not exp or not iat:
        return False

    now = datetime.now(timezone.utc).timestamp()
    total_lifetime = exp - iat
    remaining = exp - now

    return remaining < (total_lifetime * 0.5)


def build_claims(user) -> dict[str, Any]:
    """Claims carried by an access token for the given user."""
    return {
        "sub": str(user.id),
        "email": user.email,
        "name": f"{user.first_name} {user.last_name or ''}".strip(),
        "roles": list(user.roles or []),
        "recruiter_id": user.recruiter_id,
    }


def generate_refresh_token() -> str:
    """Opaque refresh token value."""
    return uuid.uuid4().hex
