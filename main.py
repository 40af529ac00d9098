import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config import settings
from shared.config.database import create_all_tables
from shared.errors import BakeryError
from shared.observability import setup_observability
from shared.realtime import ChangeFeed
from shared.realtime.router import router as realtime_router
from shared.security import TokenDenylist, limiter

# IMPORTANT: import models so they register with Base
from services.admin_service import models as admin_models  # noqa: F401
from services.auth_service import models as auth_models  # noqa: F401
from services.order_service import models as order_models  # noqa: F401
from services.product_service import models as product_models  # noqa: F401
from services.profile_service import models as profile_models  # noqa: F401
from services.subscription_service import models as subscription_models  # noqa: F401

from services.admin_service.router import router as admin_router
from services.auth_service.router import router as auth_router
from services.cart_service.router import router as cart_router
from services.cart_service.store import CartStore
from services.checkout_service.router import router as checkout_router
from services.checkout_service.session import CheckoutStore
from services.order_service.router import router as order_router
from services.product_service.catalog import CatalogCache
from services.product_service.router import router as product_router
from services.profile_service.router import router as profile_router
from services.review_service.router import router as review_router
from services.subscription_service.router import router as subscription_router

logger = structlog.get_logger(__name__)

GENERIC_FAILURE = "Something went wrong. Please refresh the page."


async def bakery_error_handler(request: Request, exc: BakeryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, title=exc.title, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_notice())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content={"title": "Error", "detail": GENERIC_FAILURE})


def create_app(with_observability: bool = True) -> FastAPI:
    app = FastAPI(title="Bakery Storefront", version="1.0.0")

    # --- OBSERVABILITY BOOTSTRAP ---
    if with_observability:
        setup_observability(app, "bakery_storefront")

    # --- SHARED STATE ---
    app.state.change_feed = ChangeFeed()
    app.state.catalog = CatalogCache(
        app.state.change_feed, debounce_seconds=settings.CATALOG_REFRESH_DEBOUNCE_SECONDS
    )
    app.state.catalog.start()
    app.state.cart_store = CartStore()
    app.state.checkout_store = CheckoutStore(ttl_seconds=settings.CHECKOUT_TTL_SECONDS)
    app.state.token_denylist = TokenDenylist()

    # --- SECURITY SETUP ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(BakeryError, bakery_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    for router in (
        auth_router,
        admin_router,
        product_router,
        cart_router,
        checkout_router,
        order_router,
        profile_router,
        subscription_router,
        review_router,
        realtime_router,
    ):
        app.include_router(router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    @app.on_event("startup")
    async def startup_event():
        await create_all_tables()
        logger.info("storefront_started")

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.catalog.stop()

    return app


app = create_app()
