from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel

from .models import Order
from .payloads import DeliveryAddressPayload, OrderItemPayload, parse_address, parse_items


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderResponse(BaseModel):
    id: str
    user_id: str
    items: list[OrderItemPayload] | None
    items_error: str | None = None
    delivery_address: DeliveryAddressPayload | None
    address_error: str | None = None
    amount: Decimal
    delivery_fee: Decimal
    tax: Decimal
    tip: Decimal
    discount_amount: Decimal
    promo_code: str | None
    total_amount: Decimal
    currency: str
    delivery_method: str
    payment_method: str
    special_instructions: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        items = parse_items(order.items)
        address = parse_address(order.delivery_address)
        return cls(
            id=order.id,
            user_id=order.user_id,
            items=items.value,
            items_error=items.error,
            delivery_address=address.value,
            address_error=address.error,
            amount=order.amount,
            delivery_fee=order.delivery_fee,
            tax=order.tax,
            tip=order.tip,
            discount_amount=order.discount_amount,
            promo_code=order.promo_code,
            total_amount=order.total_amount,
            currency=order.currency,
            delivery_method=order.delivery_method,
            payment_method=order.payment_method,
            special_instructions=order.special_instructions,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
