"""
Shared fixtures: an in-memory SQLite database per test and an httpx client
bound to the ASGI app.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("PAYMENTS_DRY_RUN", "true")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from voyager.database import Base, enable_sqlite_foreign_keys, get_session
from voyager.server import app
from voyager.storage import DatabaseStorage


@pytest.fixture(autouse=True)
def payment_env(monkeypatch):
    """Dry-run payments with no Stripe credentials from the developer's shell."""
    monkeypatch.setenv("PAYMENTS_DRY_RUN", "true")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    for key in ("STRIPE_SECRET_KEY", "STRIPE_PUBLISHABLE_KEY", "STRIPE_WEBHOOK_SECRET"):
        monkeypatch.delenv(key, raising=False)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def storage(session_factory):
    async with session_factory() as session:
        yield DatabaseStorage(session)


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def trip_data():
    return {
        "title": "Amalfi Coast Retreat",
        "location": "Amalfi, Italy",
        "image": "https://images.example/amalfi.jpg",
        "gallery": ["https://images.example/amalfi-2.jpg"],
        "price": "$3,200",
        "rating": 4.5,
        "duration": "7 days",
        "category": "Coastal",
        "features": ["Private villa", "Yacht day"],
    }


@pytest.fixture
def hotel_data():
    return {
        "title": "Hotel Le Bristol",
        "location": "Paris, France",
        "image": "https://images.example/bristol.jpg",
        "price": "€1,450/night",
        "rating": 4.9,
        "amenities": ["Spa", "Rooftop pool"],
        "stars": 5,
        "roomTypes": [
            {"name": "Deluxe Room", "price": "€1,450", "facilities": ["King bed"]},
            {"name": "Panoramic Suite", "price": "€4,800", "description": "Eiffel view", "facilities": []},
        ],
    }


@pytest.fixture
def car_data():
    return {
        "title": "Porsche 911 Cabriolet",
        "location": "Nice, France",
        "image": "https://images.example/911.jpg",
        "gallery": ["https://images.example/911-interior.jpg", "https://images.example/911-rear.jpg"],
        "price": "$1,100/day",
        "rating": 4.8,
        "specs": "Automatic • 4 Seats",
        "features": ["Convertible", "Sport Chrono"],
    }


@pytest.fixture
def offer_data():
    return {
        "title": "Lake Como Villa Weekend",
        "location": "Lake Como, Italy",
        "image": "https://images.example/como.jpg",
        "gallery": ["https://images.example/como-terrace.jpg"],
        "price": "$1,900",
        "originalPrice": "$2,700",
        "rating": 4.7,
        "endsIn": "18h 45m",
        "discount": "30% OFF",
    }
