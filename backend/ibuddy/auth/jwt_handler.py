from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ibuddy.config import settings


def create_access_token(subject: str, expires_minutes: Optional[int] = None) -> str:
    """Signed token whose subject is the user id (User#<email>)."""
    expire_minutes = expires_minutes or settings.jwt_expires_minutes
    now = datetime.now(timezone.utc)
    payload = {"sub": subject, "exp": now + timedelta(minutes=expire_minutes), "iat": now}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Raises jwt.PyJWTError for bad signatures, malformed or expired tokens."""
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
