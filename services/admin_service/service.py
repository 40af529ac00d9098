import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.schemas import UserLogin
from services.auth_service.service import AuthService
from services.order_service.repository import OrderRepository
from services.product_service.repository import ProductRepository
from shared.errors import BackendFailure, PermissionDenied, backend_call
from shared.realtime import ChangeFeed
from shared.security import TokenDenylist, verify_access_token

from .repository import AdminRepository
from .schemas import AdminLoginResponse, StoreOverview

logger = structlog.get_logger(__name__)


class AdminService:

    @staticmethod
    async def sign_in(
        db: AsyncSession,
        feed: ChangeFeed,
        denylist: TokenDenylist,
        data: UserLogin,
    ) -> AdminLoginResponse:
        """
        Sign in, then check admin_users. Anyone who is not listed is signed
        straight back out so no non-admin session survives this endpoint.
        """
        token = await AuthService.login(db, feed, data)
        claims = verify_access_token(token.access_token)

        try:
            allowed = await AdminRepository.is_admin(db, claims["sub"])
        except SQLAlchemyError as exc:
            await AuthService.logout(feed, denylist, claims)
            raise BackendFailure(str(exc), title="Admin Check Error") from exc

        if not allowed:
            await AuthService.logout(feed, denylist, claims)
            logger.warning("admin_login_refused", user_id=claims["sub"])
            raise PermissionDenied("You don't have admin privileges.", title="Access Denied")

        logger.info("admin_signed_in", user_id=claims["sub"])
        return AdminLoginResponse(**token.model_dump())

    @staticmethod
    async def overview(db: AsyncSession) -> StoreOverview:
        with backend_call("load dashboard"):
            order_count, pending, revenue = await OrderRepository.revenue_summary(db)
            product_count = await ProductRepository.count(db)
        return StoreOverview(
            total_revenue=revenue,
            order_count=order_count,
            pending_orders=pending,
            product_count=product_count,
        )
