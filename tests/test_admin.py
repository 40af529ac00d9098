from decimal import Decimal

from conftest import PASSWORD, sign_up
from services.order_service.models import Order
from shared.config.database import AsyncSessionLocal

PRODUCT = {"name": "Opera Cake", "description": "Coffee and chocolate layers", "price": "450", "category": "Cakes"}


async def test_non_admin_writes_are_refused(client, user_headers):
    resp = await client.post("/products", headers=user_headers, json=PRODUCT)
    assert resp.status_code == 403
    assert resp.json()["title"] == "Permission Error"

    resp = await client.get("/admin/overview", headers=user_headers)
    assert resp.status_code == 403


async def test_product_validation_messages(client, admin_headers):
    cases = [
        ({"name": "  "}, "Product name is required"),
        ({"description": ""}, "Product description is required"),
        ({"price": "abc"}, "Please enter a valid price"),
        ({"price": "0"}, "Please enter a valid price"),
        ({"category": "Sandwiches"}, "Please select a category"),
    ]
    for override, message in cases:
        resp = await client.post("/products", headers=admin_headers, json={**PRODUCT, **override})
        assert resp.status_code == 400
        assert resp.json()["detail"] == message


async def test_product_crud(client, admin_headers):
    created = (await client.post("/products", headers=admin_headers, json=PRODUCT)).json()
    pid = created["id"]

    resp = await client.put(f"/products/{pid}", headers=admin_headers, json={**PRODUCT, "price": 480.5})
    assert Decimal(resp.json()["price"]) == Decimal("480.5")

    found = (await client.get("/products/admin", headers=admin_headers, params={"search": "opera"})).json()
    assert [p["id"] for p in found] == [pid]

    assert (await client.delete(f"/products/{pid}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"/products/{pid}")).status_code == 404


async def test_admin_sign_in_signs_out_non_admins(app, client):
    await sign_up(client, "visitor@sweetcrumbs.io")
    events = []
    app.state.change_feed.subscribe("auth", events.append)

    resp = await client.post("/admin/auth/login", json={"email": "visitor@sweetcrumbs.io", "password": PASSWORD})
    assert resp.status_code == 403
    assert resp.json()["title"] == "Access Denied"
    assert [e.event_type for e in events] == ["SIGNED_IN", "SIGNED_OUT"]
    assert len(app.state.token_denylist) == 1


async def test_admin_sign_in_and_overview(client, admin_headers, make_product):
    await make_product("Baguette", price="60", category="Breads")
    resp = await client.post("/admin/auth/login", json={"email": "owner@sweetcrumbs.io", "password": PASSWORD})
    assert resp.status_code == 200
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    overview = (await client.get("/admin/overview", headers=headers)).json()
    assert overview["product_count"] == 1
    assert overview["order_count"] == 0
    assert overview["pending_orders"] == 0
    assert Decimal(str(overview["total_revenue"])) == 0


async def test_order_status_update_and_ownership(app, client, admin_headers, user_headers):
    me = (await client.get("/auth/me", headers=user_headers)).json()
    async with AsyncSessionLocal() as db:
        order = Order(user_id=me["id"], items=[], amount=100, total_amount=130,
                      delivery_address={"address": "1 Rye St", "city": "Goa", "postalCode": "1"})
        db.add(order)
        await db.commit()
        order_id = order.id

    stranger = await sign_up(client, "stranger@sweetcrumbs.io")
    assert (await client.get(f"/orders/{order_id}", headers=stranger)).status_code == 403
    assert (await client.get(f"/orders/{order_id}", headers=user_headers)).status_code == 200

    bad = await client.patch(f"/orders/{order_id}/status", headers=admin_headers, json={"status": "shipped"})
    assert bad.status_code == 422

    events = []
    app.state.change_feed.subscribe("orders", events.append)
    resp = await client.patch(f"/orders/{order_id}/status", headers=admin_headers, json={"status": "completed"})
    assert resp.json()["status"] == "completed"
    assert events[0].record == {"status": "completed"}

    listed = (await client.get("/orders", headers=admin_headers)).json()
    assert [o["id"] for o in listed] == [order_id]
