"""JWT verification utilities."""

from typing import Any

from jose import JWTError, jwt

from promptops.settings import settings

_DEFAULT_SECRET = "dev-secret-key-change-in-production"

if settings.environment == "production" and settings.jwt_secret_key == _DEFAULT_SECRET:
    raise RuntimeError(
        "SECURITY ERROR: JWT_SECRET_KEY environment variable must be set in production. "
        "Cannot use default secret key."
    )


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and verify a JWT access token.

    Args:
        token: JWT token to decode

    Returns:
        Decoded token payload, or None if the token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
        return payload
    except JWTError:
        return None
