from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


class ProductCategory(str, Enum):
    PASTRIES = "Pastries"
    BREADS = "Breads"
    CAKES = "Cakes"
    DESSERTS = "Desserts"
    MUFFINS = "Muffins"
    PIES = "Pies"
    COOKIES = "Cookies"
    CUPCAKES = "Cupcakes"


class ProductWrite(BaseModel):
    # Checked by validate_product, which reports one field at a time
    name: str = ""
    description: str = ""
    price: str | float | None = None
    category: str = ""
    image_url: str | None = None
    in_stock: bool = True


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    price: Decimal
    category: str
    image_url: str | None
    in_stock: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
