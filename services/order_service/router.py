from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from services.admin_service.dependencies import require_admin
from services.admin_service.repository import AdminRepository
from shared.config.database import get_db
from shared.realtime import ChangeFeed, get_change_feed
from shared.security.dependencies import get_current_user, verify_public_api_key

from .schemas import OrderResponse, OrderStatusUpdate
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"], dependencies=[Depends(verify_public_api_key)])


@router.get("", response_model=list[OrderResponse])
async def list_orders(_: str = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    orders = await OrderService.list_all(db)
    return [OrderResponse.from_order(o) for o in orders]


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    user_id: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    is_admin = await AdminRepository.is_admin(db, user_id)
    order = await OrderService.get_order_for(db, order_id, user_id, is_admin)
    return OrderResponse.from_order(order)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    order = await OrderService.update_status(db, feed, order_id, payload.status)
    return OrderResponse.from_order(order)
