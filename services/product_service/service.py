from decimal import Decimal, InvalidOperation

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import utcnow
from shared.errors import NotFound, ValidationFailed, backend_call
from shared.realtime import ChangeFeed

from .models import Product
from .repository import ProductRepository
from .schemas import ProductCategory, ProductResponse, ProductWrite

logger = structlog.get_logger(__name__)

CHANNEL = "products"


def _parse_price(raw) -> Decimal | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        price = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not price.is_finite() or price <= 0:
        return None
    return price


def validate_product(data: ProductWrite) -> dict:
    """Checks an admin product form and returns the normalized column values."""
    if not data.name.strip():
        raise ValidationFailed("Product name is required")
    if not data.description.strip():
        raise ValidationFailed("Product description is required")
    price = _parse_price(data.price)
    if price is None:
        raise ValidationFailed("Please enter a valid price")
    if data.category not in {c.value for c in ProductCategory}:
        raise ValidationFailed("Please select a category")

    return {
        "name": data.name.strip(),
        "description": data.description.strip(),
        "price": price,
        "category": data.category,
        "image_url": (data.image_url or "").strip() or None,
        "in_stock": data.in_stock,
    }


def _snapshot(product: Product) -> dict:
    return ProductResponse.model_validate(product).model_dump(mode="json")


class ProductService:

    @staticmethod
    async def create_product(db: AsyncSession, feed: ChangeFeed, data: ProductWrite) -> Product:
        product = Product(**validate_product(data))
        with backend_call("add product"):
            product = await ProductRepository.create_product(db, product)
        logger.info("product_created", product_id=product.id, name=product.name)
        await feed.emit(CHANNEL, "INSERT", product.id, **_snapshot(product))
        return product

    @staticmethod
    async def list_products(db: AsyncSession, search: str | None = None):
        with backend_call("fetch products"):
            return await ProductRepository.get_all_products(db, search)

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: str) -> Product:
        with backend_call("fetch product"):
            product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        return product

    @staticmethod
    async def update_product(db: AsyncSession, feed: ChangeFeed, product_id: str, data: ProductWrite) -> Product:
        values = validate_product(data)
        product = await ProductService.get_product_by_id(db, product_id)
        for field, value in values.items():
            setattr(product, field, value)
        product.updated_at = utcnow()
        with backend_call("update product"):
            product = await ProductRepository.update_product(db, product)
        logger.info("product_updated", product_id=product.id)
        await feed.emit(CHANNEL, "UPDATE", product.id, **_snapshot(product))
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, feed: ChangeFeed, product_id: str) -> None:
        product = await ProductService.get_product_by_id(db, product_id)
        with backend_call("delete product"):
            await ProductRepository.delete_product(db, product)
        logger.info("product_deleted", product_id=product_id)
        await feed.emit(CHANNEL, "DELETE", product_id)
