import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from services.product_service.service import ProductService

from .cart import Cart
from .store import CartStore

logger = structlog.get_logger(__name__)


class CartService:

    @staticmethod
    def create_cart(store: CartStore) -> Cart:
        cart = store.create()
        logger.info("cart_created", cart_id=cart.cart_id)
        return cart

    @staticmethod
    async def add_item_to_cart(db: AsyncSession, store: CartStore, cart_id: str, product_id: str) -> Cart:
        cart = store.get(cart_id)
        product = await ProductService.get_product_by_id(db, product_id)
        line = cart.add_item(product)
        logger.info("cart_item_added", cart_id=cart_id, product_id=product_id, quantity=line.quantity)
        return cart

    @staticmethod
    def set_quantity(store: CartStore, cart_id: str, product_id: str, quantity: int) -> Cart:
        cart = store.get(cart_id)
        cart.set_quantity(product_id, quantity)
        return cart

    @staticmethod
    def remove_item(store: CartStore, cart_id: str, product_id: str) -> Cart:
        cart = store.get(cart_id)
        cart.remove(product_id)
        return cart

    @staticmethod
    def clear_cart(store: CartStore, cart_id: str) -> None:
        store.get(cart_id).clear()

    @staticmethod
    def discard_cart(store: CartStore, cart_id: str) -> None:
        store.get(cart_id)
        store.discard(cart_id)
        logger.info("cart_discarded", cart_id=cart_id)
