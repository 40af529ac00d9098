import asyncio
import time
import uuid
from dataclasses import dataclass, field

from fastapi import Request

from services.cart_service.cart import CartLine
from shared.errors import NotFound

from .pricing import CheckoutPricing
from .steps import CheckoutFlow


@dataclass
class CheckoutSession:
    """One shopper's pass through checkout, from opening to confirmation."""

    cart_id: str
    lines: tuple[CartLine, ...]
    pricing: CheckoutPricing
    flow: CheckoutFlow = field(default_factory=CheckoutFlow)
    checkout_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    # Stored on the order row; repeated submits resolve to the same order
    idempotency_key: str = field(default_factory=lambda: str(uuid.uuid4()))
    # Set by the first submit; later submits must come from the same account
    user_id: str | None = None
    order_id: str | None = None
    transaction_id: str | None = None
    submit_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    touched_at: float = field(default_factory=time.monotonic, repr=False)


class CheckoutStore:
    """
    Process-local checkout registry.

    A session idle for longer than `ttl_seconds` is dropped the next time a
    checkout is opened, confirmed or not. Confirmed sessions stay until then
    so a repeated submit still finds its order.
    """

    def __init__(self, ttl_seconds: float = 1800):
        self.ttl_seconds = ttl_seconds
        self._sessions: dict[str, CheckoutSession] = {}

    def add(self, session: CheckoutSession) -> CheckoutSession:
        self.purge_expired()
        self._sessions[session.checkout_id] = session
        return session

    def get(self, checkout_id: str) -> CheckoutSession:
        session = self._sessions.get(checkout_id)
        if session is None:
            raise NotFound("Checkout not found")
        session.touched_at = time.monotonic()
        return session

    def discard(self, checkout_id: str) -> None:
        if self._sessions.pop(checkout_id, None) is None:
            raise NotFound("Checkout not found")

    def purge_expired(self) -> int:
        cutoff = time.monotonic() - self.ttl_seconds
        expired = [cid for cid, s in self._sessions.items() if s.touched_at < cutoff and not s.submit_lock.locked()]
        for cid in expired:
            del self._sessions[cid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


def get_checkout_store(request: Request) -> CheckoutStore:
    return request.app.state.checkout_store
