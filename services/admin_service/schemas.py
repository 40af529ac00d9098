from decimal import Decimal

from pydantic import BaseModel

from services.auth_service.schemas import TokenResponse


class AdminLoginResponse(TokenResponse):
    is_admin: bool = True


class StoreOverview(BaseModel):
    total_revenue: Decimal
    order_count: int
    pending_orders: int
    product_count: int
