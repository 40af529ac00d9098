from decimal import Decimal

import pytest

from services.checkout_service.pricing import (
    CheckoutPricing,
    DeliveryMethod,
    compute_totals,
    delivery_fee_for,
    find_promo_rule,
    round_half_up,
    tax_for,
)
from shared.errors import ValidationFailed


def test_standard_delivery_total():
    quote = compute_totals(Decimal("200"), DeliveryMethod.STANDARD.value)
    assert quote.delivery_fee == 25
    assert quote.tax == 10
    assert quote.total == 235


@pytest.mark.parametrize("method, fee", [("standard", 25), ("express", 50), ("premium", 80), ("drone", 25)])
def test_delivery_fee_table(method, fee):
    assert delivery_fee_for(method) == fee


def test_tax_rounds_half_up():
    assert tax_for(Decimal("50")) == 3
    assert tax_for(Decimal("30")) == 2
    assert round_half_up(Decimal("2.5")) == 3


def test_sweet20_then_unknown_code_keeps_discount():
    pricing = CheckoutPricing(subtotal=Decimal("200"))

    accepted = pricing.apply_promo_code("sweet20")
    assert accepted.accepted
    assert pricing.discount == 40
    assert pricing.promo_code == "SWEET20"

    rejected = pricing.apply_promo_code("BOGUS")
    assert not rejected.accepted
    assert rejected.title == "Invalid promo code"
    assert pricing.discount == 40
    assert pricing.quote().total == 235 - 40


def test_new_code_replaces_previous_discount():
    pricing = CheckoutPricing(subtotal=Decimal("200"))
    pricing.apply_promo_code("SWEET20")
    pricing.apply_promo_code("SWEET5")
    assert pricing.discount == 10
    assert pricing.promo_code == "SWEET5"


def test_fixed_amount_code():
    pricing = CheckoutPricing(subtotal=Decimal("120"))
    outcome = pricing.apply_promo_code("FIRSTORDER")
    assert outcome.discount == 50
    assert pricing.quote().total == 120 + 25 + 6 - 50


def test_total_is_not_clamped_at_zero():
    quote = compute_totals(Decimal("50"), "standard", discount=Decimal("100"))
    assert quote.tax == 3
    assert quote.total == -22


def test_quote_is_repeatable():
    pricing = CheckoutPricing(subtotal=Decimal("315"))
    pricing.set_delivery_method("express")
    pricing.set_tip(Decimal("20"))
    pricing.apply_promo_code("SWEET10")
    assert pricing.quote() == pricing.quote()
    assert pricing.quote().total == 315 + 50 + 16 + 20 - 32


def test_negative_tip_is_rejected():
    pricing = CheckoutPricing(subtotal=Decimal("100"))
    with pytest.raises(ValidationFailed):
        pricing.set_tip(Decimal("-5"))
    assert pricing.tip == 0


def test_pre_applied_discount_is_percent_of_subtotal():
    pricing = CheckoutPricing(subtotal=Decimal("250"))
    outcome = pricing.apply_pre_applied("SWEET15", Decimal("15"))
    assert outcome.accepted
    assert pricing.pre_applied
    assert pricing.discount == 38


def test_find_promo_rule_ignores_case_and_blanks():
    assert find_promo_rule("firstorder").code == "FIRSTORDER"
    assert find_promo_rule("") is None
    assert find_promo_rule(None) is None
