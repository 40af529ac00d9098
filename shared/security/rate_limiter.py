from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from .jwt_handler import verify_access_token


def user_id_or_ip(request: Request) -> str:
    """
    Rate-limit key for login and order submission.

    Signed-in shoppers share one bucket across devices; everyone else is
    bucketed by client address.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        claims = verify_access_token(token) if scheme.lower() == "bearer" and token else None
        user_id = claims.get("sub") if claims else None

    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(key_func=user_id_or_ip)
