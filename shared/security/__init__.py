from .jwt_handler import create_access_token, create_recovery_token, verify_access_token
from .dependencies import (
    verify_api_key,
    get_current_claims,
    get_current_user,
    get_optional_user,
    verify_public_api_key,
)
from .rate_limiter import limiter, user_id_or_ip
from .token_denylist import TokenDenylist

__all__ = [
    "create_access_token",
    "create_recovery_token",
    "verify_access_token",
    "verify_api_key",
    "get_current_claims",
    "get_current_user",
    "get_optional_user",
    "verify_public_api_key",
    "limiter",
    "user_id_or_ip",
    "TokenDenylist",
]
