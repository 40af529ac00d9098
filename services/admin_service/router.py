from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.schemas import UserLogin
from shared.config import settings
from shared.config.database import get_db
from shared.realtime import ChangeFeed, get_change_feed
from shared.security import limiter
from shared.security.dependencies import verify_public_api_key

from .dependencies import require_admin
from .schemas import AdminLoginResponse, StoreOverview
from .service import AdminService

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_public_api_key)])


@router.post("/auth/login", response_model=AdminLoginResponse, summary="Sign in to the admin dashboard")
@limiter.limit(settings.RATE_LIMIT_WRITE)
async def admin_login(
    request: Request,
    payload: UserLogin,
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    return await AdminService.sign_in(db, feed, request.app.state.token_denylist, payload)


@router.get("/overview", response_model=StoreOverview, summary="Dashboard counters")
async def overview(
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await AdminService.overview(db)
