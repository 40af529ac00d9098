from enum import IntEnum

from pydantic import BaseModel

from shared.errors import ValidationFailed


class CheckoutStep(IntEnum):
    CONTACT_INFO = 1
    DELIVERY_AND_EXTRAS = 2
    PAYMENT = 3
    REVIEW = 4
    CONFIRMED = 5


class PaymentMethod:
    CARD = "card"
    CASH_ON_DELIVERY = "cod"
    UPI = "upi"


class CheckoutForm(BaseModel):
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = ""
    payment_method: str = PaymentMethod.CARD
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""
    name_on_card: str = ""
    special_instructions: str = ""
    save_address: bool = False
    subscribe_newsletter: bool = False


CARD_FIELDS = ("card_number", "expiry_date", "cvv", "name_on_card")

REQUIRED_FIELDS: dict[CheckoutStep, tuple[str, ...]] = {
    CheckoutStep.CONTACT_INFO: ("email", "first_name", "last_name", "phone"),
    # delivery method always has a default, so it never blocks
    CheckoutStep.DELIVERY_AND_EXTRAS: ("address", "city", "postal_code"),
    CheckoutStep.PAYMENT: (),
}


def missing_fields(step: CheckoutStep, form: CheckoutForm) -> list[str]:
    required = REQUIRED_FIELDS.get(step, ())
    if step == CheckoutStep.PAYMENT and form.payment_method == PaymentMethod.CARD:
        required = CARD_FIELDS
    return [name for name in required if not getattr(form, name)]


class CheckoutFlow:
    """
    Linear checkout: contact -> delivery -> payment -> review -> confirmed.

    Moving forward is gated by the current step's required fields; moving
    back to any earlier step keeps everything entered so far. Confirmed is
    only reachable through confirm(), which the order submission calls once
    the order row exists.
    """

    def __init__(self, form: CheckoutForm | None = None):
        self.step = CheckoutStep.CONTACT_INFO
        self.form = form or CheckoutForm()

    @property
    def is_confirmed(self) -> bool:
        return self.step == CheckoutStep.CONFIRMED

    def update(self, **fields) -> None:
        self._ensure_open()
        self.form = self.form.model_copy(update=fields)

    def next(self) -> CheckoutStep:
        self._ensure_open()
        if self.step == CheckoutStep.REVIEW:
            raise ValidationFailed("Place your order to finish checkout")
        missing = missing_fields(self.step, self.form)
        if missing:
            raise ValidationFailed("Please complete all required fields", fields=missing)
        self.step = CheckoutStep(self.step + 1)
        return self.step

    def back(self, step: CheckoutStep) -> CheckoutStep:
        self._ensure_open()
        if step >= self.step:
            raise ValidationFailed(f"Cannot go back to step {int(step)} from step {int(self.step)}")
        self.step = step
        return self.step

    def confirm(self) -> None:
        if self.step != CheckoutStep.REVIEW:
            raise ValidationFailed("Review your order before confirming")
        self.step = CheckoutStep.CONFIRMED

    def _ensure_open(self) -> None:
        if self.is_confirmed:
            raise ValidationFailed("This order has already been placed")
