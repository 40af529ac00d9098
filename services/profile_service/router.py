from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from services.order_service.schemas import OrderResponse
from services.order_service.service import OrderService
from shared.config.database import get_db
from shared.security.dependencies import get_current_user, verify_public_api_key

from .schemas import ProfileResponse, ProfileUpdate
from .service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"], dependencies=[Depends(verify_public_api_key)])


@router.get("", response_model=ProfileResponse)
async def get_profile(user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await ProfileService.get_profile(db, user_id)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    payload: ProfileUpdate,
    user_id: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ProfileService.update_profile(db, user_id, payload)


@router.get("/orders", response_model=list[OrderResponse])
async def my_orders(user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    # Each row is parsed on its own; a malformed row carries an inline error
    orders = await OrderService.list_for_user(db, user_id)
    return [OrderResponse.from_order(o) for o in orders]
