from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security.dependencies import verify_public_api_key

from .schemas import CartItemCreate, CartResponse, QuantityUpdate
from .service import CartService
from .store import CartStore, get_cart_store

router = APIRouter(prefix="/cart", tags=["Cart"], dependencies=[Depends(verify_public_api_key)])


@router.post("", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def create_cart(store: CartStore = Depends(get_cart_store)):
    return CartResponse.from_cart(CartService.create_cart(store))


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str, store: CartStore = Depends(get_cart_store)):
    return CartResponse.from_cart(store.get(cart_id))


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_item(
    cart_id: str,
    item: CartItemCreate,
    db: AsyncSession = Depends(get_db),
    store: CartStore = Depends(get_cart_store),
):
    cart = await CartService.add_item_to_cart(db, store, cart_id, item.product_id)
    return CartResponse.from_cart(cart)


@router.put("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def set_quantity(
    cart_id: str,
    product_id: str,
    payload: QuantityUpdate,
    store: CartStore = Depends(get_cart_store),
):
    return CartResponse.from_cart(CartService.set_quantity(store, cart_id, product_id, payload.quantity))


@router.delete("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def remove_item(cart_id: str, product_id: str, store: CartStore = Depends(get_cart_store)):
    return CartResponse.from_cart(CartService.remove_item(store, cart_id, product_id))


@router.delete("/{cart_id}/items", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(cart_id: str, store: CartStore = Depends(get_cart_store)):
    """Deletes all items in the cart."""
    CartService.clear_cart(store, cart_id)


@router.delete("/{cart_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_cart(cart_id: str, store: CartStore = Depends(get_cart_store)):
    CartService.discard_cart(store, cart_id)
