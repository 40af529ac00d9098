from decimal import Decimal
from typing import List

from pydantic import BaseModel

from .cart import Cart


class CartItemCreate(BaseModel):
    product_id: str


class QuantityUpdate(BaseModel):
    quantity: int


class CartLineResponse(BaseModel):
    product_id: str
    name: str
    price: Decimal
    image: str | None
    quantity: int
    line_total: Decimal

    class Config:
        from_attributes = True


class CartResponse(BaseModel):
    cart_id: str
    items: List[CartLineResponse] = []
    item_count: int
    subtotal: Decimal

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        return cls(
            cart_id=cart.cart_id,
            items=[CartLineResponse.model_validate(line) for line in cart],
            item_count=cart.item_count,
            subtotal=cart.subtotal,
        )
