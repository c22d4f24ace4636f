"""Bearer token helpers built on JOSE JWTs."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from menuboard.core.settings import settings


class InvalidTokenError(ValueError):
    """Raised when a bearer token cannot be verified."""


def create_access_token(subject: str) -> str:
    """Create JWT access token for user authentication."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, object] = {"sub": subject, "exp": expire}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str:
    """Return the ``sub`` claim of a verified token.

    Raises:
        InvalidTokenError: If the signature, expiry or subject is invalid.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise InvalidTokenError("Could not validate credentials") from err

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise InvalidTokenError("Token has no subject")
    return subject
