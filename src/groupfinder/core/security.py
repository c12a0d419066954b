"""JWT helpers shared by the API layer and the token script."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from groupfinder.core.settings import settings

ADMIN_ROLE = "admin"


class TokenError(ValueError):
    """Raised when a bearer token cannot be decoded or lacks a subject."""


def create_access_token(
    subject: str,
    *,
    role: str | None = None,
    extra_claims: dict[str, Any] | None = None,
    expires_minutes: int | None = None,
) -> str:
    """Create a signed access token for ``subject``.

    Args:
        subject: Opaque user identifier issued by the identity provider.
        role: Optional role claim; ``"admin"`` grants admin capability.
        extra_claims: Additional claims merged into the payload.
        expires_minutes: Lifetime override; defaults to the configured value.
    """
    to_encode: dict[str, Any] = {"sub": subject}
    if role:
        to_encode["role"] = role
    if extra_claims:
        to_encode.update(extra_claims)
    lifetime = expires_minutes or settings.access_token_expire_minutes
    to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=lifetime)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate ``token``, returning its claims.

    Raises:
        TokenError: If the signature, expiry or subject is invalid.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise TokenError("Could not validate credentials") from err

    if not payload.get("sub"):
        raise TokenError("Could not validate credentials")
    return payload
