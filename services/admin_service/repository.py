from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AdminUser


class AdminRepository:

    @staticmethod
    async def is_admin(db: AsyncSession, user_id: str) -> bool:
        result = await db.execute(select(AdminUser.id).where(AdminUser.user_id == user_id))
        return result.first() is not None

    @staticmethod
    async def grant(db: AsyncSession, user_id: str) -> AdminUser:
        admin = AdminUser(user_id=user_id)
        db.add(admin)
        await db.commit()
        await db.refresh(admin)
        return admin
