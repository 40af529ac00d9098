import os
import tempfile
from decimal import Decimal

# Configuration is read at import time, so the environment comes first
_DB_DIR = tempfile.mkdtemp(prefix="bakery-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/storefront.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["PUBLIC_API_KEY"] = "test-public-key"
os.environ["PAYMENT_DELAY_SECONDS"] = "0"
os.environ["SUBSCRIPTION_PAYMENT_DELAY_SECONDS"] = "0"
os.environ["CATALOG_REFRESH_DEBOUNCE_SECONDS"] = "0.01"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from main import create_app  # noqa: E402
from services.admin_service.repository import AdminRepository  # noqa: E402
from services.auth_service.repository import UserRepository  # noqa: E402
from services.product_service.models import Product  # noqa: E402
from services.product_service.repository import ProductRepository  # noqa: E402
from shared.config.database import AsyncSessionLocal, Base, engine  # noqa: E402
from shared.security import limiter  # noqa: E402

API_KEY = "test-public-key"
PASSWORD = "crumbs123"


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def app():
    limiter.enabled = False
    application = create_app(with_observability=False)
    yield application
    await application.state.catalog.stop()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"apikey": API_KEY}) as c:
        yield c


@pytest.fixture
def make_product():
    async def _make(name="Croissant", price="200", category="Pastries", in_stock=True):
        async with AsyncSessionLocal() as db:
            return await ProductRepository.create_product(
                db,
                Product(
                    name=name,
                    description=f"Fresh {name.lower()}",
                    price=Decimal(price),
                    category=category,
                    in_stock=in_stock,
                ),
            )

    return _make


async def sign_up(client, email, password=PASSWORD, full_name="Bea Baker") -> dict:
    resp = await client.post(
        "/auth/register",
        json={"email": email, "password": password, "metadata": {"full_name": full_name}},
    )
    assert resp.status_code == 201, resp.text
    login = await client.post("/auth/login", json={"email": email, "password": password})
    assert login.status_code == 200, login.text
    return {"Authorization": f"Bearer {login.json()['access_token']}"}


async def grant_admin(email: str) -> None:
    async with AsyncSessionLocal() as db:
        user = await UserRepository.get_by_email(db, email)
        await AdminRepository.grant(db, user.id)


@pytest.fixture
async def user_headers(client):
    return await sign_up(client, "shopper@sweetcrumbs.io")


@pytest.fixture
async def admin_headers(client):
    headers = await sign_up(client, "owner@sweetcrumbs.io", full_name="Olive Owner")
    await grant_admin("owner@sweetcrumbs.io")
    return headers
