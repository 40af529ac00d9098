"""
Promote an existing account to admin.

    python -m services.admin_service.bootstrap owner@bakery.example
"""
import argparse
import asyncio

import structlog

from services.auth_service.repository import UserRepository
from shared.config.database import AsyncSessionLocal, create_all_tables, engine
from shared.errors import NotFound
from shared.observability.setup import configure_logging

from .repository import AdminRepository

logger = structlog.get_logger(__name__)


async def promote(email: str) -> bool:
    """Returns False when the user was already an admin."""
    async with AsyncSessionLocal() as db:
        user = await UserRepository.get_by_email(db, email)
        if user is None:
            raise NotFound(f"No account registered for {email}")
        if await AdminRepository.is_admin(db, user.id):
            return False
        await AdminRepository.grant(db, user.id)
    logger.info("admin_granted", user_id=user.id)
    return True


async def _main(email: str) -> None:
    import main  # noqa: F401  registers every model with Base

    await create_all_tables()
    try:
        created = await promote(email)
    finally:
        await engine.dispose()
    print(f"{email} is {'now' if created else 'already'} an admin")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Grant admin access to a registered user.")
    parser.add_argument("email")
    args = parser.parse_args()
    configure_logging()
    asyncio.run(_main(args.email))
