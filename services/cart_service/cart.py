"""
Cart state and its arithmetic.

A cart line keeps the name, price and image the product had when it was
added, so later catalog edits never change an open cart.
"""
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterator, Protocol

from shared.errors import NotFound, ValidationFailed


class Purchasable(Protocol):
    id: str
    name: str
    price: Decimal
    image_url: str | None
    in_stock: bool


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    price: Decimal
    image: str | None
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Cart:

    def __init__(self, cart_id: str):
        self.cart_id = cart_id
        # dict keeps insertion order, which is the display order
        self._lines: dict[str, CartLine] = {}

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def get(self, product_id: str) -> CartLine | None:
        return self._lines.get(product_id)

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    def add_item(self, product: Purchasable) -> CartLine:
        if not product.in_stock:
            raise ValidationFailed(f"{product.name} is currently out of stock", title="Out of stock")

        existing = self._lines.get(product.id)
        if existing:
            line = replace(existing, quantity=existing.quantity + 1)
        else:
            line = CartLine(
                product_id=product.id,
                name=product.name,
                price=Decimal(product.price),
                image=product.image_url,
                quantity=1,
            )
        self._lines[product.id] = line
        return line

    def set_quantity(self, product_id: str, quantity: int) -> CartLine | None:
        """Zero or less removes the line. There is no upper bound."""
        if product_id not in self._lines:
            raise NotFound(f"Product {product_id} is not in the cart")
        if quantity <= 0:
            del self._lines[product_id]
            return None
        line = replace(self._lines[product_id], quantity=quantity)
        self._lines[product_id] = line
        return line

    def remove(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()
