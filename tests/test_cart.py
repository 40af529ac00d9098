from decimal import Decimal
from types import SimpleNamespace

import pytest

from services.cart_service.cart import Cart
from shared.errors import NotFound, ValidationFailed


def product(pid="p1", name="Sourdough", price="80", in_stock=True):
    return SimpleNamespace(id=pid, name=name, price=Decimal(price), image_url=None, in_stock=in_stock)


def test_adding_same_product_increments_quantity():
    cart = Cart("c1")
    cart.add_item(product())
    cart.add_item(product())
    cart.add_item(product("p2", "Brownie", "45"))

    assert len(cart) == 2
    assert cart.get("p1").quantity == 2
    assert cart.item_count == 3
    assert cart.subtotal == Decimal("205")
    assert [line.product_id for line in cart] == ["p1", "p2"]


def test_out_of_stock_product_is_refused():
    cart = Cart("c1")
    with pytest.raises(ValidationFailed) as exc:
        cart.add_item(product(in_stock=False))
    assert exc.value.title == "Out of stock"
    assert len(cart) == 0


def test_line_keeps_price_it_was_added_at():
    cart = Cart("c1")
    item = product(price="80")
    cart.add_item(item)
    item.price = Decimal("95")
    cart.add_item(item)
    assert cart.get("p1").price == Decimal("80")
    assert cart.subtotal == Decimal("160")


def test_zero_quantity_removes_line():
    cart = Cart("c1")
    cart.add_item(product())
    assert cart.set_quantity("p1", 0) is None
    assert cart.get("p1") is None


def test_quantity_of_unknown_line():
    with pytest.raises(NotFound):
        Cart("c1").set_quantity("missing", 2)


async def test_cart_endpoints(client, make_product):
    scone = await make_product("Scone", price="60")
    cart_id = (await client.post("/cart")).json()["cart_id"]

    resp = await client.post(f"/cart/{cart_id}/items", json={"product_id": scone.id})
    assert resp.status_code == 200
    resp = await client.put(f"/cart/{cart_id}/items/{scone.id}", json={"quantity": 4})
    body = resp.json()
    assert body["item_count"] == 4
    assert Decimal(body["subtotal"]) == 240

    resp = await client.delete(f"/cart/{cart_id}/items")
    assert resp.status_code == 204
    assert (await client.get(f"/cart/{cart_id}")).json()["items"] == []

    assert (await client.delete(f"/cart/{cart_id}")).status_code == 204
    missing = await client.get(f"/cart/{cart_id}")
    assert missing.status_code == 404
    assert missing.json() == {"title": "Not Found", "detail": "Cart not found"}


async def test_out_of_stock_over_http(client, make_product):
    pie = await make_product("Apple Pie", category="Pies", in_stock=False)
    cart_id = (await client.post("/cart")).json()["cart_id"]
    resp = await client.post(f"/cart/{cart_id}/items", json={"product_id": pie.id})
    assert resp.status_code == 400
    assert resp.json()["title"] == "Out of stock"


async def test_missing_api_key_is_rejected(client):
    resp = await client.post("/cart", headers={"apikey": "wrong"})
    assert resp.status_code == 403
