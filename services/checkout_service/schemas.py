from decimal import Decimal

from pydantic import BaseModel, Field

from services.cart_service.schemas import CartLineResponse
from services.order_service.schemas import OrderResponse

from .pricing import DeliveryMethod, PromoOutcome
from .session import CheckoutSession
from .steps import CheckoutForm, CheckoutStep


class Notice(BaseModel):
    title: str
    detail: str
    variant: str = "default"  # 'default' or 'destructive'

    @classmethod
    def from_outcome(cls, outcome: PromoOutcome) -> "Notice":
        return cls(
            title=outcome.title,
            detail=outcome.detail,
            variant="default" if outcome.accepted else "destructive",
        )


class CheckoutOpen(BaseModel):
    cart_id: str
    pre_applied_code: str | None = None


class CheckoutDetailsUpdate(BaseModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    payment_method: str | None = None
    card_number: str | None = None
    expiry_date: str | None = None
    cvv: str | None = None
    name_on_card: str | None = None
    special_instructions: str | None = None
    save_address: bool | None = None
    subscribe_newsletter: bool | None = None
    delivery_method: DeliveryMethod | None = None
    tip: Decimal | None = None

    def form_fields(self) -> dict:
        return self.model_dump(exclude_none=True, exclude={"delivery_method", "tip"})


class PromoApply(BaseModel):
    code: str


class StepBack(BaseModel):
    step: CheckoutStep


class PriceQuote(BaseModel):
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    tip: Decimal
    discount: Decimal
    total: Decimal
    promo_code: str | None
    delivery_method: str

    class Config:
        from_attributes = True


class CheckoutContact(BaseModel):
    """Form data echoed back. Card secrets never leave the server."""

    email: str
    first_name: str
    last_name: str
    phone: str
    address: str
    city: str
    postal_code: str
    payment_method: str
    special_instructions: str
    save_address: bool
    subscribe_newsletter: bool

    @classmethod
    def from_form(cls, form: CheckoutForm) -> "CheckoutContact":
        return cls.model_validate(form.model_dump(include=set(cls.model_fields)))


class CheckoutResponse(BaseModel):
    checkout_id: str
    cart_id: str
    step: CheckoutStep
    step_name: str
    items: list[CartLineResponse]
    item_count: int
    details: CheckoutContact
    quote: PriceQuote
    order_id: str | None = None
    transaction_id: str | None = None
    notice: Notice | None = None

    @classmethod
    def from_session(cls, session: CheckoutSession, notice: Notice | None = None) -> "CheckoutResponse":
        quote = session.pricing.quote()
        return cls(
            checkout_id=session.checkout_id,
            cart_id=session.cart_id,
            step=session.flow.step,
            step_name=session.flow.step.name.lower(),
            items=[CartLineResponse.model_validate(line) for line in session.lines],
            item_count=sum(line.quantity for line in session.lines),
            details=CheckoutContact.from_form(session.flow.form),
            quote=PriceQuote(
                **{name: getattr(quote, name) for name in ("subtotal", "delivery_fee", "tax", "tip", "discount", "total")},
                promo_code=session.pricing.promo_code,
                delivery_method=session.pricing.delivery_method,
            ),
            order_id=session.order_id,
            transaction_id=session.transaction_id,
            notice=notice,
        )


class OrderPlacedResponse(BaseModel):
    checkout: CheckoutResponse
    order: OrderResponse
    notice: Notice = Field(
        default_factory=lambda: Notice(
            title="Order placed successfully!",
            detail="You'll receive an email confirmation shortly.",
        )
    )
