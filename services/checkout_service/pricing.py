"""
CHECKOUT PRICING

Turns a cart subtotal plus the shopper's choices into the payable total:

    total = subtotal + delivery_fee + tax + tip - discount

Rules:
- delivery fee comes from a fixed table keyed by delivery method
- tax is 5% of the subtotal only, rounded half-up to a whole unit
- at most one promo code is active; applying a new one replaces the old
  discount, an unknown code changes nothing
- the total is never clamped, a large discount can make it negative

Everything here is pure: the same inputs always give the same breakdown.
"""
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from shared.errors import ValidationFailed

ZERO = Decimal("0")
WHOLE_UNIT = Decimal("1")
TAX_RATE = Decimal("0.05")


class DeliveryMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    PREMIUM = "premium"


DELIVERY_FEES: dict[str, Decimal] = {
    DeliveryMethod.STANDARD.value: Decimal("25"),
    DeliveryMethod.EXPRESS.value: Decimal("50"),
    DeliveryMethod.PREMIUM.value: Decimal("80"),
}


def round_half_up(value: Decimal) -> Decimal:
    """Round to a whole currency unit, halves away from zero (2.5 -> 3)."""
    return Decimal(value).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def delivery_fee_for(method: str | None) -> Decimal:
    return DELIVERY_FEES.get(method or "", DELIVERY_FEES[DeliveryMethod.STANDARD.value])


def tax_for(subtotal: Decimal) -> Decimal:
    return round_half_up(Decimal(subtotal) * TAX_RATE)


@dataclass(frozen=True)
class PromoRule:
    code: str
    title: str
    detail: str
    percent: Decimal | None = None
    fixed_amount: Decimal | None = None

    def matches(self, code: str) -> bool:
        return code.lower() == self.code.lower()

    def discount_for(self, subtotal: Decimal) -> Decimal:
        if self.fixed_amount is not None:
            return self.fixed_amount
        return round_half_up(Decimal(subtotal) * self.percent / 100)


# First match wins. Codes never combine.
PROMO_RULES: tuple[PromoRule, ...] = (
    PromoRule("SWEET20", "Review reward applied!", "You saved 20% with your 5-star review!", percent=Decimal("20")),
    PromoRule("SWEET15", "Review reward applied!", "You saved 15% with your 4-star review!", percent=Decimal("15")),
    PromoRule("SWEET10", "Review reward applied!", "You saved 10% with your review!", percent=Decimal("10")),
    PromoRule("SWEET5", "Review reward applied!", "You saved 5% with your review!", percent=Decimal("5")),
    PromoRule("FIRSTORDER", "Welcome discount applied!", "50 off your first order.", fixed_amount=Decimal("50")),
)


def find_promo_rule(code: str | None) -> PromoRule | None:
    if not code:
        return None
    for rule in PROMO_RULES:
        if rule.matches(code):
            return rule
    return None


@dataclass(frozen=True)
class PromoOutcome:
    accepted: bool
    title: str
    detail: str
    code: str | None = None
    discount: Decimal = ZERO

    @classmethod
    def rejected(cls) -> "PromoOutcome":
        return cls(False, "Invalid promo code", "Please check your code and try again.")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    tip: Decimal
    discount: Decimal
    total: Decimal


def compute_totals(
    subtotal: Decimal,
    delivery_method: str | None = DeliveryMethod.STANDARD.value,
    tip: Decimal = ZERO,
    discount: Decimal = ZERO,
) -> PriceBreakdown:
    subtotal = Decimal(subtotal)
    tip = Decimal(tip)
    discount = Decimal(discount)
    fee = delivery_fee_for(delivery_method)
    tax = tax_for(subtotal)
    return PriceBreakdown(
        subtotal=subtotal,
        delivery_fee=fee,
        tax=tax,
        tip=tip,
        discount=discount,
        total=subtotal + fee + tax + tip - discount,
    )


@dataclass
class CheckoutPricing:
    """The mutable pricing inputs of one checkout. quote() derives the rest."""

    subtotal: Decimal
    delivery_method: str = DeliveryMethod.STANDARD.value
    tip: Decimal = ZERO
    discount: Decimal = ZERO
    promo_code: str | None = None
    pre_applied: bool = field(default=False)

    def set_tip(self, tip: Decimal) -> None:
        tip = Decimal(tip)
        if tip < 0:
            raise ValidationFailed("Tip cannot be negative")
        self.tip = tip

    def set_delivery_method(self, method: str) -> None:
        self.delivery_method = method

    def apply_promo_code(self, code: str) -> PromoOutcome:
        rule = find_promo_rule(code)
        if rule is None:
            return PromoOutcome.rejected()
        self.discount = rule.discount_for(self.subtotal)
        self.promo_code = rule.code
        self.pre_applied = False
        return PromoOutcome(True, rule.title, rule.detail, rule.code, self.discount)

    def apply_pre_applied(self, code: str, percent: Decimal) -> PromoOutcome:
        """Discount carried over from the review-reward flow, percent of subtotal."""
        self.discount = round_half_up(self.subtotal * Decimal(percent) / 100)
        self.promo_code = code
        self.pre_applied = True
        return PromoOutcome(
            True,
            "Review discount applied!",
            f"{code} ({percent}% off) - {self.discount} saved!",
            code,
            self.discount,
        )

    def quote(self) -> PriceBreakdown:
        return compute_totals(self.subtotal, self.delivery_method, self.tip, self.discount)
