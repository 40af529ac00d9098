from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.errors import PermissionDenied, backend_call
from shared.security.dependencies import get_current_user

from .repository import AdminRepository


async def require_admin(
    user_id: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> str:
    """Dependency admitting only users listed in admin_users. Returns the user ID."""
    with backend_call("check admin status"):
        allowed = await AdminRepository.is_admin(db, user_id)
    if not allowed:
        raise PermissionDenied("You don't have permission to do this. Check your admin status.")
    return user_id
