from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.config.database import get_db
from shared.realtime import ChangeFeed, get_change_feed
from shared.security import limiter
from shared.security.dependencies import get_current_claims, get_current_user, verify_public_api_key

from .schemas import (
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    SessionResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"], dependencies=[Depends(verify_public_api_key)])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    return await AuthService.register(db, feed, payload)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate and receive a JWT access token",
)
@limiter.limit(settings.RATE_LIMIT_WRITE)
async def login(
    request: Request,
    payload: UserLogin,
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    return await AuthService.login(db, feed, payload)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Revoke the current token")
async def logout(
    request: Request,
    claims: dict = Depends(get_current_claims),
    feed: ChangeFeed = Depends(get_change_feed),
):
    await AuthService.logout(feed, request.app.state.token_denylist, claims)


@router.get("/session", response_model=SessionResponse, summary="Describe the current session")
async def get_session(claims: dict = Depends(get_current_claims), db: AsyncSession = Depends(get_db)):
    return await AuthService.get_session(db, claims)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current authenticated user's account",
)
async def get_me(
    user_id: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await AuthService.get_user_by_id(db, user_id)


@router.post("/reset-password", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED)
async def reset_password(
    payload: PasswordResetRequest,
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    await AuthService.request_password_reset(db, feed, payload.email)
    return MessageResponse(title="Reset Link Sent!", detail="Check your email for the password reset link.")


@router.post("/reset-password/confirm", response_model=UserResponse)
async def confirm_password_reset(
    payload: PasswordResetConfirm,
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    return await AuthService.confirm_password_reset(db, feed, payload)
