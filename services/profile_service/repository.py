from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import utcnow

from .models import Profile


class ProfileRepository:

    @staticmethod
    async def get_by_user(db: AsyncSession, user_id: str) -> Optional[Profile]:
        result = await db.execute(select(Profile).where(Profile.user_id == user_id))
        return result.scalars().first()

    @staticmethod
    async def stage_upsert(db: AsyncSession, user_id: str, **values) -> Profile:
        """Insert or update the user's profile row without committing (onConflict: user_id)."""
        profile = await ProfileRepository.get_by_user(db, user_id)
        if profile is None:
            profile = Profile(user_id=user_id)
            db.add(profile)
        for field, value in values.items():
            setattr(profile, field, value)
        profile.updated_at = utcnow()
        await db.flush()
        return profile

    @staticmethod
    async def upsert(db: AsyncSession, user_id: str, **values) -> Profile:
        profile = await ProfileRepository.stage_upsert(db, user_id, **values)
        await db.commit()
        await db.refresh(profile)
        return profile
