from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Order


class OrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: Order) -> Order:
        db.add(order)
        await db.commit()
        await db.refresh(order)
        return order

    @staticmethod
    async def get_order(db: AsyncSession, order_id: str) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.id == order_id))
        return result.scalars().first()

    @staticmethod
    async def list_orders(db: AsyncSession, user_id: str | None = None) -> Sequence[Order]:
        stmt = select(Order).order_by(Order.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(Order.user_id == user_id)
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def save(db: AsyncSession, order: Order) -> Order:
        db.add(order)
        await db.commit()
        await db.refresh(order)
        return order

    @staticmethod
    async def revenue_summary(db: AsyncSession) -> tuple[int, int, object]:
        """(order count, pending count, sum of total_amount)"""
        total = await db.execute(select(func.count(), func.coalesce(func.sum(Order.total_amount), 0)).select_from(Order))
        count, revenue = total.one()
        pending = await db.execute(select(func.count()).select_from(Order).where(Order.status == "pending"))
        return count, pending.scalar_one(), revenue
