from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.admin_service.dependencies import require_admin
from shared.config.database import get_db
from shared.realtime import ChangeFeed, get_change_feed
from shared.security.dependencies import verify_public_api_key

from .catalog import CatalogCache, get_catalog
from .schemas import ProductResponse, ProductWrite
from .service import ProductService

router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(verify_public_api_key)])


@router.get("", response_model=list[ProductResponse])
async def browse_catalog(
    category: str | None = Query(default=None),
    catalog: CatalogCache = Depends(get_catalog),
):
    return await catalog.products(category)


@router.get("/categories", response_model=list[str])
async def list_categories(catalog: CatalogCache = Depends(get_catalog)):
    return await catalog.categories()


@router.get("/admin", response_model=list[ProductResponse])
async def admin_list_products(
    search: str | None = Query(default=None),
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await ProductService.list_products(db, search)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductWrite,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    return await ProductService.create_product(db, feed, payload)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, db: AsyncSession = Depends(get_db)):
    return await ProductService.get_product_by_id(db, product_id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    payload: ProductWrite,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    return await ProductService.update_product(db, feed, product_id, payload)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    await ProductService.delete_product(db, feed, product_id)
