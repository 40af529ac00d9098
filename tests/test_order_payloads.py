from services.order_service.models import Order
from services.order_service.payloads import (
    ADDRESS_PARSE_ERROR,
    ITEMS_PARSE_ERROR,
    DeliveryAddressPayload,
    dump_address,
    parse_address,
    parse_items,
)
from shared.config.database import AsyncSessionLocal


def test_items_from_json_text():
    result = parse_items('[{"id": "p1", "name": "Baguette", "quantity": 2, "price": 40}]')
    assert result.ok
    assert result.value[0].name == "Baguette"
    assert result.value[0].quantity == 2


def test_malformed_items_give_inline_error():
    for raw in ("not json", '{"name": "x"}', [{"name": "Bagel", "quantity": 0, "price": 5}]):
        result = parse_items(raw)
        assert not result.ok
        assert result.error == ITEMS_PARSE_ERROR


def test_address_accepts_stored_camel_case():
    result = parse_address({"address": "1 Rye St", "city": "Goa", "postalCode": "403001"})
    assert result.ok
    assert result.value.postal_code == "403001"


def test_address_missing_city():
    result = parse_address('{"address": "1 Rye St"}')
    assert result.error == ADDRESS_PARSE_ERROR


def test_address_is_stored_camel_case():
    address = DeliveryAddressPayload(address="1 Rye St", city="Goa", postal_code="403001")
    assert dump_address(address) == {"address": "1 Rye St", "city": "Goa", "postalCode": "403001"}


async def test_bad_row_does_not_break_order_list(app, client, user_headers):
    me = (await client.get("/auth/me", headers=user_headers)).json()
    async with AsyncSessionLocal() as db:
        db.add(Order(user_id=me["id"], items="garbage", amount=10, total_amount=38,
                     delivery_address={"city": "Goa"}))
        db.add(Order(user_id=me["id"], items=[{"name": "Muffin", "quantity": 1, "price": "10"}], amount=10,
                     total_amount=38, delivery_address={"address": "1 Rye St", "city": "Goa", "postalCode": "1"}))
        await db.commit()

    orders = (await client.get("/profile/orders", headers=user_headers)).json()
    assert len(orders) == 2
    errors = {(o["items_error"], o["address_error"]) for o in orders}
    assert errors == {(None, None), (ITEMS_PARSE_ERROR, ADDRESS_PARSE_ERROR)}
