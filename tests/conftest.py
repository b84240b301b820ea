import json
import os

# Settings are read once and cached, so the environment must be in place
# before anything from the app is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["INTERNAL_API_KEY"] = "test-internal-key"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ.pop("OTLP_ENDPOINT", None)

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from main import app
from services.auth_service.models import Address, User
from services.cart_service.models import CartItem
from services.cart_service.repository import CartRepository
from services.payment_service.gateway import RazorpayGateway, get_payment_gateway
from services.product_service.models import Product
from shared.config.database import Base, engine_options, get_db
from shared.security import create_access_token, limiter

GATEWAY_SECRET = "rzp_test_secret"
INTERNAL_KEY = "test-internal-key"


class FakeRazorpay:
    """Stands in for the Razorpay REST API behind an httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.status_code = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": {"description": "bad request"}})
        return httpx.Response(
            200,
            json={
                "id": f"order_{len(self.requests):04d}",
                "entity": "order",
                "amount": body["amount"],
                "currency": body["currency"],
                "receipt": body["receipt"],
                "status": "created",
            },
        )

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def razorpay():
    return FakeRazorpay()


@pytest.fixture
def gateway(razorpay):
    return RazorpayGateway(
        key_id="rzp_test_key",
        key_secret=GATEWAY_SECRET,
        base_url="https://api.razorpay.test/v1",
        transport=httpx.MockTransport(razorpay),
    )


@pytest.fixture
async def session_factory():
    url = "sqlite+aiosqlite://"
    engine = create_async_engine(url, **engine_options(url))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, gateway):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    limiter.reset()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


class Shop:
    """Seeds users, catalog and carts straight into the database."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def _add(self, obj):
        async with self.session_factory() as session:
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
            return obj

    async def user(self, email="buyer@example.com", name="Buyer", addresses=0) -> User:
        user = await self._add(User(email=email, name=name, hashed_password="not-a-real-hash"))
        for n in range(addresses):
            await self._add(
                Address(
                    user_id=user.id,
                    street=f"{n + 1} MG Road",
                    city="Bengaluru",
                    state="KA",
                    zip_code=f"56000{n + 1}",
                    country="India",
                )
            )
        return user

    async def product(self, price, merchant, name="Widget") -> Product:
        return await self._add(Product(name=name, price=price, merchant_id=merchant.id))

    async def add_to_cart(self, user, product, quantity=1) -> CartItem:
        return await self._add(CartItem(user_id=user.id, product_id=product.id, quantity=quantity))

    async def delete_product(self, product):
        async with self.session_factory() as session:
            await session.delete(await session.get(Product, product.id))
            await session.commit()

    async def cart_size(self, user) -> int:
        async with self.session_factory() as session:
            return len(await CartRepository.get_items(session, user.id))


@pytest.fixture
def shop(session_factory):
    return Shop(session_factory)


@pytest.fixture
async def merchant(shop):
    return await shop.user(email="seller@example.com", name="Seller")


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}
    return _headers
