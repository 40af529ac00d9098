from decimal import Decimal
from functools import partial

import pytest
from sqlalchemy.exc import OperationalError
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from services.product_service.catalog import CatalogCache
from shared.errors import BackendFailure
from shared.realtime import ChangeEvent, ChangeFeed, DebouncedTask


async def test_failing_subscriber_does_not_block_others():
    feed = ChangeFeed()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    async def collector(event):
        seen.append(event.record_id)

    feed.subscribe("products", broken)
    feed.subscribe("products", collector)
    await feed.emit("products", "INSERT", "p1", name="Eclair")
    assert seen == ["p1"]


async def test_unsubscribe_stops_delivery():
    feed = ChangeFeed()
    seen = []
    unsubscribe = feed.subscribe("orders", seen.append)
    unsubscribe()
    await feed.emit("orders", "UPDATE", "o1")
    assert seen == []
    assert feed.subscriber_count("orders") == 0


async def test_burst_of_triggers_runs_once():
    calls = []

    async def work():
        calls.append(1)

    task = DebouncedTask(work, delay=0.01)
    for _ in range(5):
        task.trigger()
    await task.flush()
    assert calls == [1]


async def test_catalog_refetches_on_change():
    feed = ChangeFeed()
    fetches = []

    async def fetcher():
        fetches.append(1)
        return []

    catalog = CatalogCache(feed, fetcher=fetcher, debounce_seconds=0.01)
    catalog.start()
    await catalog.products()
    for _ in range(3):
        await feed.emit("products", "UPDATE", "p1")
    await catalog.settle()
    await catalog.stop()
    assert len(fetches) == 2


async def test_admin_product_edit_reaches_public_catalog(app, client, admin_headers):
    assert (await client.get("/products")).json() == []

    resp = await client.post(
        "/products",
        headers=admin_headers,
        json={"name": "Rye Loaf", "description": "Dense and dark", "price": "150", "category": "Breads"},
    )
    assert resp.status_code == 201
    await app.state.catalog.settle()

    catalog = (await client.get("/products")).json()
    assert [p["name"] for p in catalog] == ["Rye Loaf"]
    assert Decimal(catalog[0]["price"]) == 150
    assert (await client.get("/products/categories")).json() == ["All", "Breads"]
    assert (await client.get("/products", params={"category": "Cakes"})).json() == []


def socket_client(app) -> TestClient:
    # Tables are managed by the database fixture
    app.router.on_startup.clear()
    return TestClient(app)


async def test_websocket_streams_table_changes(app):
    emit = partial(app.state.change_feed.emit, "orders", "UPDATE", "o1", status="completed")
    with socket_client(app) as tc:
        with tc.websocket_connect("/realtime/orders?apikey=test-public-key") as ws:
            tc.portal.call(emit)
            message = ws.receive_json()
    event = ChangeEvent.model_validate(message)
    assert event.record_id == "o1"
    assert event.record == {"status": "completed"}


async def test_websocket_refuses_auth_channel(app):
    with socket_client(app) as tc:
        with pytest.raises(WebSocketDisconnect):
            with tc.websocket_connect("/realtime/auth?apikey=test-public-key"):
                pass
        with pytest.raises(WebSocketDisconnect):
            with tc.websocket_connect("/realtime/orders?apikey=wrong"):
                pass


async def test_cold_catalog_store_failure_is_a_backend_error():
    async def broken_fetch():
        raise OperationalError("SELECT products", {}, Exception("database is down"))

    catalog = CatalogCache(ChangeFeed(), fetcher=broken_fetch)
    with pytest.raises(BackendFailure) as exc:
        await catalog.products()
    assert exc.value.title == "Database Error"
