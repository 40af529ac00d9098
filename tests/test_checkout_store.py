from decimal import Decimal

from services.checkout_service.pricing import CheckoutPricing
from services.checkout_service.session import CheckoutSession, CheckoutStore


def new_session() -> CheckoutSession:
    return CheckoutSession(cart_id="c1", lines=(), pricing=CheckoutPricing(subtotal=Decimal("100")))


def test_idle_sessions_are_dropped_when_a_new_checkout_opens():
    store = CheckoutStore(ttl_seconds=60)
    stale = store.add(new_session())
    fresh = store.add(new_session())
    stale.touched_at -= 120

    store.add(new_session())

    assert len(store) == 2
    assert fresh.checkout_id in store._sessions
    assert stale.checkout_id not in store._sessions


async def test_session_being_submitted_is_kept():
    store = CheckoutStore(ttl_seconds=60)
    busy = store.add(new_session())
    busy.touched_at -= 120
    async with busy.submit_lock:
        assert store.purge_expired() == 0
    assert store.purge_expired() == 1


def test_get_refreshes_idle_clock():
    store = CheckoutStore(ttl_seconds=60)
    session = store.add(new_session())
    session.touched_at -= 120
    store.get(session.checkout_id)
    assert store.purge_expired() == 0
