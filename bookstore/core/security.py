from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from bookstore.core.config import settings
from bookstore.core.errors import InvalidTokenError, ServerError, TokenExpiredError

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72
_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, decoded from a bearer token."""

    id: uuid.UUID
    email: str
    username: str | None = None


def hash_password(password: str) -> str:
    hashed = bcrypt.hashpw(
        password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
        bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS),
    )
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:_BCRYPT_MAX_BYTES], hashed.encode("utf-8")
        )
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def parse_expires_in(value: str) -> timedelta:
    """
    Parse "7d", "12h", "30m", "45s" or a bare number of seconds.
    """
    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(f"Invalid token lifetime: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


def _secret() -> str:
    if not settings.JWT_SECRET:
        raise ServerError("JWT secret not configured")
    return settings.JWT_SECRET


def create_access_token(identity: Identity, expires_in: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else parse_expires_in(settings.JWT_EXPIRES_IN)
    payload: dict[str, object] = {
        "id": str(identity.id),
        "email": identity.email,
        "username": identity.username,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, _secret(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Identity:
    """
    Validate signature and expiry.
    Raises TokenExpiredError or InvalidTokenError (both 401).
    """
    try:
        payload = jwt.decode(
            token,
            _secret(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "id", "email"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError() from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError() from e

    try:
        user_id = uuid.UUID(str(payload["id"]))
    except ValueError as e:
        raise InvalidTokenError() from e

    username = payload.get("username")
    return Identity(
        id=user_id,
        email=str(payload["email"]),
        username=str(username) if username is not None else None,
    )
