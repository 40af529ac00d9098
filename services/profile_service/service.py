import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFound, backend_call

from .models import Profile
from .repository import ProfileRepository
from .schemas import ProfileUpdate

logger = structlog.get_logger(__name__)


class ProfileService:

    @staticmethod
    async def get_profile(db: AsyncSession, user_id: str) -> Profile:
        with backend_call("load profile"):
            profile = await ProfileRepository.get_by_user(db, user_id)
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    @staticmethod
    async def update_profile(db: AsyncSession, user_id: str, data: ProfileUpdate) -> Profile:
        with backend_call("update profile"):
            profile = await ProfileRepository.upsert(
                db, user_id, full_name=data.full_name, phone=data.phone, address=data.address
            )
        logger.info("profile_updated", user_id=user_id)
        return profile
