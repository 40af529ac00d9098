import time
from decimal import Decimal

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.cart_service.store import CartStore
from services.order_service.models import Order
from services.order_service.payloads import (
    DeliveryAddressPayload,
    OrderItemPayload,
    dump_address,
    dump_items,
)
from services.order_service.repository import OrderRepository
from services.payment_service.service import PaymentService
from shared.config import settings
from shared.errors import BackendFailure, LoginRequired, PermissionDenied, ValidationFailed
from shared.observability.metrics import (
    bakery_checkout_duration_seconds,
    bakery_checkout_total,
    bakery_promo_applied_total,
)
from shared.realtime import ChangeFeed

from .pricing import CheckoutPricing, DeliveryMethod, PromoOutcome, find_promo_rule
from .session import CheckoutSession, CheckoutStore
from .steps import CheckoutStep

logger = structlog.get_logger(__name__)


class CheckoutService:

    @staticmethod
    def open_checkout(
        carts: CartStore,
        checkouts: CheckoutStore,
        cart_id: str,
        pre_applied_code: str | None = None,
    ) -> tuple[CheckoutSession, PromoOutcome | None]:
        cart = carts.get(cart_id)
        if not len(cart):
            raise ValidationFailed("Your cart is empty")

        session = CheckoutSession(
            cart_id=cart_id,
            lines=tuple(cart.lines),
            pricing=CheckoutPricing(subtotal=cart.subtotal),
        )
        checkouts.add(session)

        outcome = None
        if pre_applied_code:
            # Only codes from the rule table are honoured; the percent is
            # looked up here, never taken from the client.
            rule = find_promo_rule(pre_applied_code)
            if rule is not None and rule.percent is not None:
                outcome = session.pricing.apply_pre_applied(rule.code, rule.percent)
                bakery_promo_applied_total.labels(result="pre_applied").inc()
            else:
                logger.warning("pre_applied_code_ignored", code=pre_applied_code)

        logger.info("checkout_opened", checkout_id=session.checkout_id, cart_id=cart_id)
        return session, outcome

    @staticmethod
    def update_details(
        session: CheckoutSession,
        fields: dict,
        delivery_method: DeliveryMethod | None = None,
        tip: Decimal | None = None,
    ) -> None:
        if fields:
            session.flow.update(**fields)
        if delivery_method is not None:
            session.pricing.set_delivery_method(delivery_method.value)
        if tip is not None:
            session.pricing.set_tip(tip)

    @staticmethod
    def apply_promo(session: CheckoutSession, code: str) -> PromoOutcome:
        outcome = session.pricing.apply_promo_code(code)
        bakery_promo_applied_total.labels(result="accepted" if outcome.accepted else "rejected").inc()
        if not outcome.accepted:
            logger.info("promo_rejected", checkout_id=session.checkout_id)
        return outcome

    @staticmethod
    def build_order(session: CheckoutSession, user_id: str) -> Order:
        form = session.flow.form
        quote = session.pricing.quote()
        items = [
            OrderItemPayload(id=line.product_id, name=line.name, quantity=line.quantity,
                             price=line.price, image=line.image)
            for line in session.lines
        ]
        address = DeliveryAddressPayload(address=form.address, city=form.city, postal_code=form.postal_code)
        return Order(
            user_id=user_id,
            checkout_key=session.idempotency_key,
            items=dump_items(items),
            amount=quote.subtotal,
            delivery_fee=quote.delivery_fee,
            tax=quote.tax,
            tip=quote.tip,
            discount_amount=quote.discount,
            promo_code=session.pricing.promo_code,
            total_amount=quote.total,
            currency=settings.CURRENCY,
            delivery_method=session.pricing.delivery_method,
            delivery_address=dump_address(address),
            special_instructions=form.special_instructions or None,
            payment_method=form.payment_method,
            status="pending",
        )

    @staticmethod
    async def submit_order(
        db: AsyncSession,
        session: CheckoutSession,
        user_id: str | None,
        carts: CartStore,
        feed: ChangeFeed,
    ) -> Order:
        """
        Place the order for a checkout sitting at the review step.

        Exactly one insert per checkout: concurrent or repeated submits wait
        on the session lock and get the order the first one created.
        """
        if user_id is None:
            raise LoginRequired("Please sign in before placing your order.")

        async with session.submit_lock:
            if session.user_id is not None and session.user_id != user_id:
                raise PermissionDenied("This checkout belongs to another account.")
            if session.order_id is not None:
                bakery_checkout_total.labels(status="duplicate").inc()
                return await OrderRepository.get_order(db, session.order_id)

            if session.flow.step != CheckoutStep.REVIEW:
                raise ValidationFailed("Review your order before confirming")

            session.user_id = user_id
            started = time.perf_counter()
            order = CheckoutService.build_order(session, user_id)
            try:
                order = await OrderRepository.create_order(db, order)
            except SQLAlchemyError as exc:
                # Stay at review; the shopper retries by submitting again
                await db.rollback()
                bakery_checkout_total.labels(status="failed").inc()
                logger.error("order_insert_failed", checkout_id=session.checkout_id, error=str(exc))
                raise BackendFailure(str(exc), title="Order failed") from exc

            session.order_id = order.id
            session.transaction_id = await PaymentService.process_payment(
                order.total_amount, settings.PAYMENT_DELAY_SECONDS
            )
            session.flow.confirm()
            # The cart may already have been discarded; the order stands either way
            cart = carts.find(session.cart_id)
            if cart is not None:
                cart.clear()

            await feed.emit("orders", "INSERT", order.id, status=order.status)

            bakery_checkout_total.labels(status="success").inc()
            bakery_checkout_duration_seconds.observe(time.perf_counter() - started)
            logger.info(
                "order_placed",
                order_id=order.id,
                user_id=user_id,
                total=str(order.total_amount),
                promo_code=order.promo_code,
            )
            return order
