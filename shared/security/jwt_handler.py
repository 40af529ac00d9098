import os
import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from shared.config import settings  # noqa: F401  loads .env before the secret is read

SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not SECRET_KEY:
    raise ValueError("FATAL ERROR: JWT_SECRET_KEY is not set in the environment!")

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60
RECOVERY_TOKEN_EXPIRE_MINUTES = 15

ACCESS_PURPOSE = "access"
RECOVERY_PURPOSE = "recovery"


def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    """Creates a JWT access token with a UTC expiration and a unique jti."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.setdefault("purpose", ACCESS_PURPOSE)
    to_encode.update({"exp": expire, "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_recovery_token(user_id: str) -> str:
    """Short-lived token that only allows a password reset."""
    return create_access_token(
        {"sub": user_id, "purpose": RECOVERY_PURPOSE},
        expires_delta=timedelta(minutes=RECOVERY_TOKEN_EXPIRE_MINUTES),
    )


def verify_access_token(token: str, purpose: str = ACCESS_PURPOSE) -> dict | None:
    """Decodes and verifies the JWT. Returns payload if valid, None if invalid/expired."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("purpose", ACCESS_PURPOSE) != purpose:
        return None
    return payload
