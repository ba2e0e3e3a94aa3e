"""Pytest configuration and fixtures"""
import os

# Set test environment variables before the application modules load settings
os.environ.setdefault("DATABASE_URL", "sqlite:///./storefront-test-unused.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")

from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport

from storefront.core.database import build_engine, build_sessionmaker, init_db, get_db
from storefront.models import Product, User
from storefront.api.v1.cart.schemas import CartOwner


@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite database file per test"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def products(session_factory):
    """Seed catalog; returns product ids keyed by short name"""
    catalog = {
        "dune": Product(name="Dune", price=Decimal("9.99"), stock_quantity=5),
        "emma": Product(name="Emma", price=Decimal("4.50"), stock_quantity=200),
        "beowulf": Product(name="Beowulf", price=Decimal("12.00"), stock_quantity=0),
        "anna": Product(name="Anna Karenina", price=Decimal("7.25"), stock_quantity=150),
    }
    async with session_factory() as session:
        session.add_all(catalog.values())
        await session.commit()
    return {key: product.id for key, product in catalog.items()}


@pytest.fixture
async def user_id(session_factory):
    async with session_factory() as session:
        user = User(email="shopper@example.com", password_hash="not-a-real-hash")
        session.add(user)
        await session.commit()
        return user.id


@pytest.fixture
def user_owner(user_id):
    return CartOwner.for_user(user_id)


@pytest.fixture
def guest_owner():
    return CartOwner.for_session("guest-session-1")


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app with get_db bound to the test database"""
    from storefront.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()
