from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.admin_service.dependencies import require_admin
from shared.config.database import get_db
from shared.realtime import ChangeFeed, get_change_feed
from shared.security.dependencies import get_current_user, get_optional_user, verify_public_api_key

from .benefits import benefits_for
from .schemas import BenefitsResponse, PlanResponse, PlanWrite, PurchaseRequest, SubscriptionResponse
from .service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["Membership"], dependencies=[Depends(verify_public_api_key)])


@router.get("/plans", response_model=list[PlanResponse])
async def list_plans(db: AsyncSession = Depends(get_db)):
    return await SubscriptionService.list_plans(db)


@router.get("/plans/all", response_model=list[PlanResponse])
async def list_all_plans(_: str = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    return await SubscriptionService.list_plans(db, active_only=False)


@router.post("/plans", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
async def create_plan(
    payload: PlanWrite,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    return await SubscriptionService.create_plan(db, feed, payload)


@router.put("/plans/{plan_id}", response_model=PlanResponse)
async def update_plan(
    plan_id: str,
    payload: PlanWrite,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    return await SubscriptionService.update_plan(db, feed, plan_id, payload)


@router.delete("/plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(
    plan_id: str,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    await SubscriptionService.delete_plan(db, feed, plan_id)


@router.get("/me", response_model=SubscriptionResponse | None)
async def my_subscription(user_id: str = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await SubscriptionService.current_subscription(db, user_id)


@router.post("/purchase", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def purchase(
    payload: PurchaseRequest,
    user_id: str | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    return await SubscriptionService.purchase(db, user_id, payload.plan_id)


@router.get("/benefits/{tier}", response_model=BenefitsResponse)
async def membership_benefits(tier: str):
    return BenefitsResponse(**benefits_for(tier).as_dict())
