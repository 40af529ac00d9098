from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.cart_service.store import CartStore, get_cart_store
from services.order_service.schemas import OrderResponse
from shared.config import settings
from shared.config.database import get_db
from shared.realtime import ChangeFeed, get_change_feed
from shared.security import limiter
from shared.security.dependencies import get_optional_user, verify_public_api_key

from .schemas import (
    CheckoutDetailsUpdate,
    CheckoutOpen,
    CheckoutResponse,
    Notice,
    OrderPlacedResponse,
    PromoApply,
    StepBack,
)
from .service import CheckoutService
from .session import CheckoutStore, get_checkout_store

router = APIRouter(prefix="/checkout", tags=["Checkout"], dependencies=[Depends(verify_public_api_key)])


@router.post("", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def open_checkout(
    payload: CheckoutOpen,
    carts: CartStore = Depends(get_cart_store),
    checkouts: CheckoutStore = Depends(get_checkout_store),
):
    session, outcome = CheckoutService.open_checkout(carts, checkouts, payload.cart_id, payload.pre_applied_code)
    return CheckoutResponse.from_session(session, Notice.from_outcome(outcome) if outcome else None)


@router.get("/{checkout_id}", response_model=CheckoutResponse)
async def get_checkout(checkout_id: str, checkouts: CheckoutStore = Depends(get_checkout_store)):
    return CheckoutResponse.from_session(checkouts.get(checkout_id))


@router.patch("/{checkout_id}", response_model=CheckoutResponse)
async def update_details(
    checkout_id: str,
    payload: CheckoutDetailsUpdate,
    checkouts: CheckoutStore = Depends(get_checkout_store),
):
    session = checkouts.get(checkout_id)
    CheckoutService.update_details(session, payload.form_fields(), payload.delivery_method, payload.tip)
    return CheckoutResponse.from_session(session)


@router.post("/{checkout_id}/next", response_model=CheckoutResponse)
async def next_step(checkout_id: str, checkouts: CheckoutStore = Depends(get_checkout_store)):
    session = checkouts.get(checkout_id)
    session.flow.next()
    return CheckoutResponse.from_session(session)


@router.post("/{checkout_id}/back", response_model=CheckoutResponse)
async def previous_step(
    checkout_id: str,
    payload: StepBack,
    checkouts: CheckoutStore = Depends(get_checkout_store),
):
    session = checkouts.get(checkout_id)
    session.flow.back(payload.step)
    return CheckoutResponse.from_session(session)


@router.post("/{checkout_id}/promo", response_model=CheckoutResponse)
async def apply_promo(
    checkout_id: str,
    payload: PromoApply,
    checkouts: CheckoutStore = Depends(get_checkout_store),
):
    # A rejected code is not an error: state is unchanged and the notice says why
    session = checkouts.get(checkout_id)
    outcome = CheckoutService.apply_promo(session, payload.code)
    return CheckoutResponse.from_session(session, Notice.from_outcome(outcome))


@router.post("/{checkout_id}/submit", response_model=OrderPlacedResponse)
@limiter.limit(settings.RATE_LIMIT_WRITE)
async def submit_order(
    request: Request,
    checkout_id: str,
    user_id: str | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
    carts: CartStore = Depends(get_cart_store),
    checkouts: CheckoutStore = Depends(get_checkout_store),
    feed: ChangeFeed = Depends(get_change_feed),
):
    session = checkouts.get(checkout_id)
    order = await CheckoutService.submit_order(db, session, user_id, carts, feed)
    return OrderPlacedResponse(
        checkout=CheckoutResponse.from_session(session),
        order=OrderResponse.from_order(order),
    )


@router.delete("/{checkout_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_checkout(checkout_id: str, checkouts: CheckoutStore = Depends(get_checkout_store)):
    checkouts.discard(checkout_id)
