from datetime import datetime, timezone

import structlog
from fastapi import HTTPException, status
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from services.admin_service.repository import AdminRepository
from services.profile_service.repository import ProfileRepository
from shared.realtime import AUTH_CHANNEL, ChangeFeed
from shared.security import TokenDenylist
from shared.security.jwt_handler import (
    RECOVERY_PURPOSE,
    create_access_token,
    create_recovery_token,
    verify_access_token,
)

from .models import User
from .repository import UserRepository
from .schemas import PasswordResetConfirm, SessionResponse, TokenResponse, UserCreate, UserLogin, UserResponse

logger = structlog.get_logger(__name__)

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _expiry(claims: dict) -> datetime:
    return datetime.fromtimestamp(claims["exp"], tz=timezone.utc)


class AuthService:

    @staticmethod
    def _hash_password(password: str) -> str:
        return _pwd_context.hash(password)

    @staticmethod
    def _verify_password(plain: str, hashed: str) -> bool:
        return _pwd_context.verify(plain, hashed)

    @staticmethod
    async def register(db: AsyncSession, feed: ChangeFeed, data: UserCreate) -> User:
        existing = await UserRepository.get_by_email(db, data.email)
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered",
            )
        user = User(
            email=data.email.lower(),
            hashed_password=AuthService._hash_password(data.password),
            user_metadata=data.metadata,
        )
        await UserRepository.create(db, user)
        # Every account gets a profile row, seeded from the sign-up metadata
        await ProfileRepository.stage_upsert(db, user.id, full_name=str(data.metadata.get("full_name", "")))
        await db.commit()
        await db.refresh(user)

        logger.info("user_signed_up", user_id=user.id)
        await feed.emit(AUTH_CHANNEL, "SIGNED_UP", user.id, email=user.email)
        return user

    @staticmethod
    async def authenticate(db: AsyncSession, data: UserLogin) -> User:
        user = await UserRepository.get_by_email(db, data.email)
        if not user or not AuthService._verify_password(data.password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is disabled",
            )
        return user

    @staticmethod
    async def login(db: AsyncSession, feed: ChangeFeed, data: UserLogin) -> TokenResponse:
        user = await AuthService.authenticate(db, data)
        token = create_access_token(data={"sub": user.id})
        claims = verify_access_token(token)

        logger.info("user_signed_in", user_id=user.id)
        await feed.emit(AUTH_CHANNEL, "SIGNED_IN", user.id, email=user.email)
        return TokenResponse(access_token=token, expires_at=_expiry(claims))

    @staticmethod
    async def logout(feed: ChangeFeed, denylist: TokenDenylist, claims: dict) -> None:
        denylist.revoke(claims["jti"], claims["exp"])
        logger.info("user_signed_out", user_id=claims["sub"])
        await feed.emit(AUTH_CHANNEL, "SIGNED_OUT", claims["sub"])

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: str) -> User:
        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    @staticmethod
    async def get_session(db: AsyncSession, claims: dict) -> SessionResponse:
        user = await AuthService.get_user_by_id(db, claims["sub"])
        return SessionResponse(
            user=UserResponse.model_validate(user),
            is_admin=await AdminRepository.is_admin(db, user.id),
            expires_at=_expiry(claims),
        )

    @staticmethod
    async def request_password_reset(db: AsyncSession, feed: ChangeFeed, email: str) -> None:
        """
        Issue a recovery token for a known address. Unknown addresses get the
        same silent success so accounts cannot be probed.
        """
        user = await UserRepository.get_by_email(db, email)
        if user is None:
            logger.info("password_recovery_unknown_email")
            return
        # The mailer listens on the auth channel; the token is never logged
        await feed.emit(
            AUTH_CHANNEL,
            "PASSWORD_RECOVERY",
            user.id,
            email=user.email,
            recovery_token=create_recovery_token(user.id),
        )
        logger.info("password_recovery_issued", user_id=user.id)

    @staticmethod
    async def confirm_password_reset(db: AsyncSession, feed: ChangeFeed, data: PasswordResetConfirm) -> User:
        claims = verify_access_token(data.token, purpose=RECOVERY_PURPOSE)
        if claims is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Reset link is invalid or has expired",
            )
        user = await AuthService.get_user_by_id(db, claims["sub"])
        user = await UserRepository.set_password(db, user, AuthService._hash_password(data.new_password))
        logger.info("password_reset", user_id=user.id)
        await feed.emit(AUTH_CHANNEL, "USER_UPDATED", user.id)
        return user
