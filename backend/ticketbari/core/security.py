from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from ticketbari.core.config import Settings


def create_access_token(settings: Settings, email: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(tz=timezone.utc) + (expires_delta or timedelta(days=settings.access_token_expire_days))
    to_encode: dict[str, Any] = {"sub": email, "email": email, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(settings: Settings, token: str) -> dict[str, Any]:
    """Decode and verify an access token.
    Raises jwt.PyJWTError if invalid or expired and returns the payload as a dict.
    """
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
