"""Pytest configuration and fixtures for ShipTrack tests.

The app runs against an in-memory SQLite database (aiosqlite) instead of
PostgreSQL. Every request gets its own session, committed or rolled back
the same way `get_db` does in production.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shiptrack.auth.jwt import create_access_token
from shiptrack.database import Base, get_db
from shiptrack.main import app
from shiptrack.models import *  # noqa: F401,F403 — register all tables
from shiptrack.models.item_type import ItemType
from shiptrack.models.supplier import Supplier
from shiptrack.models.user import User, UserRole


# ── Test Database Setup ──────────────────────────────────────────

@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Test client with the database dependency pointed at the test engine."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Test Data Fixtures ───────────────────────────────────────────

async def _create_user(session_factory, user_id: str, email: str, role: UserRole) -> User:
    async with session_factory() as session:
        user = User(
            id=user_id,
            email=email,
            first_name=role.value.title(),
            last_name="Tester",
            role=role,
        )
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def admin_user(session_factory) -> User:
    return await _create_user(session_factory, "idp|admin", "admin@example.com", UserRole.ADMIN)


@pytest_asyncio.fixture
async def operator_user(session_factory) -> User:
    return await _create_user(session_factory, "idp|operator", "operator@example.com", UserRole.OPERATOR)


@pytest_asyncio.fixture
async def viewer_user(session_factory) -> User:
    return await _create_user(session_factory, "idp|viewer", "viewer@example.com", UserRole.VIEWER)


def _headers(user: User) -> dict:
    token = create_access_token(
        user_id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return _headers(admin_user)


@pytest.fixture
def operator_headers(operator_user: User) -> dict:
    return _headers(operator_user)


@pytest.fixture
def viewer_headers(viewer_user: User) -> dict:
    return _headers(viewer_user)


@pytest_asyncio.fixture
async def supplier(session_factory) -> Supplier:
    async with session_factory() as session:
        supplier = Supplier(name="Guangzhou Trading Co", default_country="CN")
        session.add(supplier)
        await session.commit()
        return supplier


@pytest_asyncio.fixture
async def item_type(session_factory) -> ItemType:
    async with session_factory() as session:
        item_type = ItemType(name="Ceramic Tiles")
        session.add(item_type)
        await session.commit()
        return item_type


@pytest_asyncio.fixture
async def second_item_type(session_factory) -> ItemType:
    async with session_factory() as session:
        item_type = ItemType(name="Sanitary Ware")
        session.add(item_type)
        await session.commit()
        return item_type


@pytest_asyncio.fixture
async def shipment(client: AsyncClient, operator_headers: dict) -> dict:
    """A CREATED shipment owned by the operator."""
    response = await client.post(
        "/api/shipments/",
        json={"shipment_name": "Q4 Import", "shipment_number": "SHIP-001"},
        headers=operator_headers,
    )
    assert response.status_code == 201
    return response.json()


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Pure function tests, no database")
    config.addinivalue_line("markers", "api: HTTP endpoint tests")
    config.addinivalue_line("markers", "auth: Authentication and access control tests")
    config.addinivalue_line("markers", "workflow: Shipment status workflow tests")
