from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SubscriptionPlan, UserSubscription


class SubscriptionRepository:

    @staticmethod
    async def list_plans(db: AsyncSession, active_only: bool = True) -> Sequence[SubscriptionPlan]:
        stmt = select(SubscriptionPlan).order_by(SubscriptionPlan.price_monthly.asc())
        if active_only:
            stmt = stmt.where(SubscriptionPlan.active.is_(True))
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def get_plan(db: AsyncSession, plan_id: str) -> Optional[SubscriptionPlan]:
        result = await db.execute(select(SubscriptionPlan).where(SubscriptionPlan.id == plan_id))
        return result.scalars().first()

    @staticmethod
    async def save_plan(db: AsyncSession, plan: SubscriptionPlan) -> SubscriptionPlan:
        db.add(plan)
        await db.commit()
        await db.refresh(plan)
        return plan

    @staticmethod
    async def delete_plan(db: AsyncSession, plan: SubscriptionPlan) -> None:
        await db.delete(plan)
        await db.commit()

    @staticmethod
    async def get_active_subscription(db: AsyncSession, user_id: str) -> Optional[UserSubscription]:
        result = await db.execute(
            select(UserSubscription)
            .where(UserSubscription.user_id == user_id)
            .where(UserSubscription.status == "active")
            .order_by(UserSubscription.current_period_end.desc())
            .limit(1)
        )
        return result.scalars().first()

    # The two methods below only stage changes; the caller commits them
    # together with the profile tier update.

    @staticmethod
    async def stage_cancel_active(db: AsyncSession, user_id: str) -> None:
        await db.execute(
            update(UserSubscription)
            .where(UserSubscription.user_id == user_id)
            .where(UserSubscription.status == "active")
            .values(status="canceled")
        )

    @staticmethod
    async def stage_subscription(db: AsyncSession, subscription: UserSubscription) -> UserSubscription:
        db.add(subscription)
        await db.flush()
        return subscription
