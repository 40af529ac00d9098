from decimal import Decimal

from sqlalchemy import select

from services.subscription_service.models import UserSubscription
from shared.config.database import AsyncSessionLocal

PLAN = {"name": "Royal Club", "tier": "royal", "price_monthly": "999", "features": ["Free delivery"]}


async def create_plan(client, headers, **overrides) -> dict:
    resp = await client.post("/subscriptions/plans", headers=headers, json={**PLAN, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_public_plans_are_active_and_cheapest_first(client, admin_headers):
    await create_plan(client, admin_headers)
    await create_plan(client, admin_headers, name="Premium Club", tier="premium", price_monthly="499")
    await create_plan(client, admin_headers, name="Retired", tier="basic", price_monthly="99", active=False)

    plans = (await client.get("/subscriptions/plans")).json()
    assert [p["name"] for p in plans] == ["Premium Club", "Royal Club"]
    assert len((await client.get("/subscriptions/plans/all", headers=admin_headers)).json()) == 3


async def test_purchase_requires_login(client, admin_headers):
    plan = await create_plan(client, admin_headers)
    resp = await client.post("/subscriptions/purchase", json={"plan_id": plan["id"]})
    assert resp.status_code == 401
    assert resp.json()["title"] == "Login required"


async def test_purchase_replaces_active_membership(client, admin_headers, user_headers):
    premium = await create_plan(client, admin_headers, name="Premium Club", tier="premium", price_monthly="499")
    royal = await create_plan(client, admin_headers)

    first = await client.post("/subscriptions/purchase", headers=user_headers, json={"plan_id": premium["id"]})
    assert first.status_code == 201
    second = await client.post("/subscriptions/purchase", headers=user_headers, json={"plan_id": royal["id"]})
    assert second.status_code == 201

    current = (await client.get("/subscriptions/me", headers=user_headers)).json()
    assert current["plan_id"] == royal["id"]
    assert (await client.get("/profile", headers=user_headers)).json()["membership_tier"] == "royal"

    async with AsyncSessionLocal() as db:
        rows = (await db.execute(select(UserSubscription.status))).scalars().all()
    assert sorted(rows) == ["active", "canceled"]


async def test_inactive_plan_cannot_be_bought(client, admin_headers, user_headers):
    plan = await create_plan(client, admin_headers, active=False)
    resp = await client.post("/subscriptions/purchase", headers=user_headers, json={"plan_id": plan["id"]})
    assert resp.status_code == 400


async def test_benefits_table(client):
    royal = (await client.get("/subscriptions/benefits/royal")).json()
    assert royal["discount_percent"] == 30
    assert royal["free_delivery_threshold"] is None

    unknown = (await client.get("/subscriptions/benefits/platinum")).json()
    assert unknown["tier"] == "basic"
    assert Decimal(unknown["free_delivery_threshold"]) == 300
