import uuid

from fastapi import Request

from shared.errors import NotFound
from shared.observability.metrics import bakery_active_carts

from .cart import Cart


class CartStore:
    """Process-local cart registry. Nothing here outlives the process."""

    def __init__(self):
        self._carts: dict[str, Cart] = {}

    def create(self) -> Cart:
        cart = Cart(str(uuid.uuid4()))
        self._carts[cart.cart_id] = cart
        bakery_active_carts.inc()
        return cart

    def get(self, cart_id: str) -> Cart:
        cart = self._carts.get(cart_id)
        if cart is None:
            raise NotFound("Cart not found")
        return cart

    def find(self, cart_id: str) -> Cart | None:
        return self._carts.get(cart_id)

    def discard(self, cart_id: str) -> None:
        if self._carts.pop(cart_id, None) is not None:
            bakery_active_carts.dec()

    def __len__(self) -> int:
        return len(self._carts)


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store
