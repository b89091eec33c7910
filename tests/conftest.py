import os
import tempfile
import uuid
from decimal import Decimal

# Configure the app before anything imports shared.config.settings
_DB_PATH = os.path.join(tempfile.gettempdir(), f"agrovet-checkout-{uuid.uuid4().hex}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["INTERNAL_API_KEY"] = "test-internal-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TRACING_ENABLED"] = "false"
os.environ["PAYMENT_AMOUNT_TOLERANCE"] = "1"
os.environ["BLESSED_ENDPOINT"] = ""
os.environ["UMESIKIA_ENDPOINT"] = ""

import httpx
import pytest

from main import app
from services.account_service.models import Provider, User
from services.cart_service.models import CartLine
from services.order_service.models import Order
from services.product_service.models import Product
from shared.config.database import AsyncSessionLocal, create_tables, drop_tables
from shared.notifications import get_sms_sender
from shared.security import issue_access_token
from sqlalchemy import func, select


@pytest.fixture(autouse=True)
async def reset_db():
    await drop_tables()
    await create_tables()
    yield
    app.dependency_overrides.clear()


@pytest.fixture(scope="session", autouse=True)
def remove_db_file():
    yield
    if os.path.exists(_DB_PATH):
        os.remove(_DB_PATH)


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class Seed:
    """Writes fixtures straight to the database and reads state back in fresh sessions."""

    async def _save(self, obj):
        async with AsyncSessionLocal() as session:
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
            return obj

    async def user(self, name="Farmer Jane", role="farmer", phone="0712345678", email=None):
        email = email or f"{uuid.uuid4().hex[:8]}@example.com"
        return await self._save(User(name=name, role=role, phone=phone, email=email))

    async def seller(self, name="Agrovet Owner", shop_name="Green Agrovet", phone="0722000000"):
        owner = await self.user(name=name, role="agrovet", phone=phone)
        provider = await self._save(Provider(user_id=owner.id, name=name, shop_name=shop_name))
        return owner, provider

    async def product(self, provider, name="Dairy Meal", price="100", quantity=5):
        return await self._save(
            Product(
                provider_id=provider.id if provider else None,
                name=name,
                price=Decimal(price),
                quantity=quantity,
                company="Unga Farm Care",
            )
        )

    async def cart_line(self, user, product, qty):
        return await self._save(CartLine(user_id=user.id, product_id=product.id, qty=qty))

    async def stock(self, product_id) -> int:
        async with AsyncSessionLocal() as session:
            result = await session.execute(select(Product.quantity).where(Product.id == product_id))
            return result.scalar_one()

    async def order_count(self) -> int:
        async with AsyncSessionLocal() as session:
            result = await session.execute(select(func.count(Order.id)))
            return result.scalar_one()

    async def cart_count(self, user) -> int:
        async with AsyncSessionLocal() as session:
            result = await session.execute(select(func.count(CartLine.id)).where(CartLine.user_id == user.id))
            return result.scalar_one()


@pytest.fixture
def seed():
    return Seed()


def auth_headers(user) -> dict:
    token = issue_access_token(user.id, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth_headers


class RecordingSms:
    """Stand-in SMS sender that remembers what it was asked to send."""

    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    @property
    def enabled(self):
        return True

    async def send(self, recipients, message):
        if self.fail:
            raise httpx.ConnectError("gateway unreachable")
        self.sent.append((recipients, message))


@pytest.fixture
def sms():
    sender = RecordingSms()
    app.dependency_overrides[get_sms_sender] = lambda: sender
    return sender


@pytest.fixture
def failing_sms():
    sender = RecordingSms(fail=True)
    app.dependency_overrides[get_sms_sender] = lambda: sender
    return sender
