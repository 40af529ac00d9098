import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import utcnow
from shared.errors import NotFound, PermissionDenied, backend_call
from shared.realtime import ChangeFeed

from .models import Order
from .repository import OrderRepository
from .schemas import OrderStatus

logger = structlog.get_logger(__name__)

CHANNEL = "orders"


class OrderService:

    @staticmethod
    async def get_order(db: AsyncSession, order_id: str) -> Order:
        with backend_call("fetch order"):
            order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFound("Order not found")
        return order

    @staticmethod
    async def get_order_for(db: AsyncSession, order_id: str, user_id: str, is_admin: bool = False) -> Order:
        order = await OrderService.get_order(db, order_id)
        if order.user_id != user_id and not is_admin:
            raise PermissionDenied("You don't have permission to view this order.")
        return order

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: str):
        with backend_call("fetch orders"):
            return await OrderRepository.list_orders(db, user_id=user_id)

    @staticmethod
    async def list_all(db: AsyncSession):
        with backend_call("fetch orders"):
            return await OrderRepository.list_orders(db)

    @staticmethod
    async def update_status(db: AsyncSession, feed: ChangeFeed, order_id: str, status: OrderStatus) -> Order:
        # Last write wins, there is no version check
        order = await OrderService.get_order(db, order_id)
        order.status = status.value
        order.updated_at = utcnow()
        with backend_call("update order status"):
            order = await OrderRepository.save(db, order)
        logger.info("order_status_updated", order_id=order_id, status=order.status)
        await feed.emit(CHANNEL, "UPDATE", order.id, status=order.status)
        return order
