from datetime import timedelta

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.payment_service.service import PaymentService
from services.profile_service.repository import ProfileRepository
from shared.config import settings
from shared.config.database import utcnow
from shared.errors import BackendFailure, LoginRequired, NotFound, ValidationFailed, backend_call
from shared.realtime import ChangeFeed

from .models import SubscriptionPlan, UserSubscription
from .repository import SubscriptionRepository
from .schemas import PlanWrite

logger = structlog.get_logger(__name__)

BILLING_PERIOD = timedelta(days=30)
PLANS_CHANNEL = "subscription_plans"


class SubscriptionService:

    @staticmethod
    async def list_plans(db: AsyncSession, active_only: bool = True):
        with backend_call("load subscription plans"):
            return await SubscriptionRepository.list_plans(db, active_only)

    @staticmethod
    async def get_plan(db: AsyncSession, plan_id: str) -> SubscriptionPlan:
        with backend_call("load subscription plan"):
            plan = await SubscriptionRepository.get_plan(db, plan_id)
        if plan is None:
            raise NotFound("Subscription plan not found")
        return plan

    @staticmethod
    async def current_subscription(db: AsyncSession, user_id: str) -> UserSubscription | None:
        with backend_call("load subscription"):
            return await SubscriptionRepository.get_active_subscription(db, user_id)

    @staticmethod
    async def purchase(db: AsyncSession, user_id: str | None, plan_id: str) -> UserSubscription:
        """
        Activate a membership plan for the user.

        Prior active rows are cancelled before the new one is inserted. This
        is application logic only, so two purchases racing each other can
        still leave two active rows.
        """
        if user_id is None:
            raise LoginRequired("Please log in to subscribe to a plan")

        plan = await SubscriptionService.get_plan(db, plan_id)
        if not plan.active:
            raise ValidationFailed("This plan is no longer available")

        await PaymentService.process_payment(plan.price_monthly, settings.SUBSCRIPTION_PAYMENT_DELAY_SECONDS)

        now = utcnow()
        try:
            await SubscriptionRepository.stage_cancel_active(db, user_id)
            subscription = await SubscriptionRepository.stage_subscription(
                db,
                UserSubscription(
                    user_id=user_id,
                    plan_id=plan.id,
                    status="active",
                    current_period_start=now,
                    current_period_end=now + BILLING_PERIOD,
                ),
            )
            await ProfileRepository.stage_upsert(db, user_id, membership_tier=plan.tier)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("membership_purchase_failed", user_id=user_id, plan_id=plan_id, error=str(exc))
            raise BackendFailure(str(exc), title="Purchase Failed") from exc

        await db.refresh(subscription)
        logger.info("membership_activated", user_id=user_id, plan=plan.name, tier=plan.tier)
        return subscription

    # --- ADMIN ---

    @staticmethod
    async def create_plan(db: AsyncSession, feed: ChangeFeed, data: PlanWrite) -> SubscriptionPlan:
        plan = SubscriptionPlan(**data.model_dump(mode="python"))
        plan.tier = data.tier.value
        with backend_call("add subscription plan"):
            plan = await SubscriptionRepository.save_plan(db, plan)
        await feed.emit(PLANS_CHANNEL, "INSERT", plan.id, name=plan.name)
        return plan

    @staticmethod
    async def update_plan(db: AsyncSession, feed: ChangeFeed, plan_id: str, data: PlanWrite) -> SubscriptionPlan:
        plan = await SubscriptionService.get_plan(db, plan_id)
        for field, value in data.model_dump(mode="python").items():
            setattr(plan, field, value)
        plan.tier = data.tier.value
        with backend_call("update subscription plan"):
            plan = await SubscriptionRepository.save_plan(db, plan)
        await feed.emit(PLANS_CHANNEL, "UPDATE", plan.id, name=plan.name)
        return plan

    @staticmethod
    async def delete_plan(db: AsyncSession, feed: ChangeFeed, plan_id: str) -> None:
        plan = await SubscriptionService.get_plan(db, plan_id)
        with backend_call("delete subscription plan"):
            await SubscriptionRepository.delete_plan(db, plan)
        await feed.emit(PLANS_CHANNEL, "DELETE", plan_id)
