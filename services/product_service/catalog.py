"""
Public catalog view of the products table.

The list is never patched incrementally: any change signal on the products
channel schedules a full refetch from the data store. Bursts of changes are
debounced into one refetch.
"""
from typing import Awaitable, Callable

import structlog
from fastapi import Request

from shared.config.database import AsyncSessionLocal
from shared.errors import backend_call
from shared.observability.metrics import bakery_catalog_refetch_total
from shared.realtime import ChangeEvent, ChangeFeed, DebouncedTask

from .repository import ProductRepository
from .schemas import ProductResponse

logger = structlog.get_logger(__name__)

ALL_CATEGORIES = "All"

Fetcher = Callable[[], Awaitable[list[ProductResponse]]]


async def fetch_catalog() -> list[ProductResponse]:
    async with AsyncSessionLocal() as db:
        products = await ProductRepository.get_all_products(db)
        return [ProductResponse.model_validate(p) for p in products]


class CatalogCache:

    def __init__(self, feed: ChangeFeed, fetcher: Fetcher = fetch_catalog, debounce_seconds: float = 0.25):
        self._feed = feed
        self._fetcher = fetcher
        self._products: list[ProductResponse] | None = None
        self._refetch = DebouncedTask(self.refresh, debounce_seconds)
        self._unsubscribe: Callable[[], None] | None = None

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._feed.subscribe("products", self._on_change)

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._refetch.cancel()

    def _on_change(self, event: ChangeEvent) -> None:
        logger.info("catalog_change_received", event_type=event.event_type, product_id=event.record_id)
        self._refetch.trigger()

    async def refresh(self) -> None:
        products = await self._fetcher()
        bakery_catalog_refetch_total.inc()
        self._products = products
        logger.info("catalog_refetched", count=len(products))

    async def settle(self) -> None:
        """Wait for any scheduled refetch to land."""
        await self._refetch.flush()

    async def products(self, category: str | None = None) -> list[ProductResponse]:
        if self._products is None:
            with backend_call("fetch products"):
                await self.refresh()
        if not category or category == ALL_CATEGORIES:
            return list(self._products)
        return [p for p in self._products if p.category == category]

    async def categories(self) -> list[str]:
        products = await self.products()
        seen = dict.fromkeys(p.category for p in products)
        return [ALL_CATEGORIES, *seen]


def get_catalog(request: Request) -> CatalogCache:
    return request.app.state.catalog
