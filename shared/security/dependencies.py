import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader, OAuth2PasswordBearer

from shared.config import settings

from .jwt_handler import verify_access_token

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

# Public key every storefront client sends
api_key_header = APIKeyHeader(name="apikey", auto_error=False)


def verify_api_key(provided_key: str | None) -> bool:
    """Constant-time check of the public key, read from settings at call time."""
    if not provided_key:
        return False
    return secrets.compare_digest(provided_key, settings.PUBLIC_API_KEY)


def _decode(request: Request, token: str | None) -> dict | None:
    if not token:
        return None
    payload = verify_access_token(token)
    if payload is None or payload.get("sub") is None:
        return None
    if request.app.state.token_denylist.is_revoked(payload.get("jti")):
        return None
    return payload


async def get_current_claims(request: Request, token: str = Depends(oauth2_scheme)) -> dict:
    """Dependency to validate the JWT and return its full payload."""
    payload = _decode(request, token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    # Store in request state for downstream use (like rate limiting)
    request.state.user_id = payload["sub"]
    return payload


async def get_current_user(claims: dict = Depends(get_current_claims)) -> str:
    """Dependency returning the authenticated user ID (sub)."""
    return claims["sub"]


async def get_optional_user(request: Request, token: str = Depends(oauth2_scheme)) -> str | None:
    """Like get_current_user, but lets the service decide what a missing identity means."""
    payload = _decode(request, token)
    if payload is None:
        return None
    request.state.user_id = payload["sub"]
    return payload["sub"]


async def verify_public_api_key(api_key: str = Depends(api_key_header)) -> bool:
    """Dependency rejecting requests that do not carry the public API key."""
    if not verify_api_key(api_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or missing apikey header"
        )
    return True
