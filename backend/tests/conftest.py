"""
Shared test fixtures.

Uses an in-memory SQLite database for fast testing.
UUID columns are compiled as CHAR(36) for SQLite compatibility.
For integration tests against PostgreSQL, use docker compose.
"""

import uuid
from decimal import Decimal
from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles

from homevault.core.database import Base, get_db
from homevault.main import app
from homevault.models.core import House, Item, Room
from homevault.models.infrastructure import User


# ─── SQLite compatibility: UUID → CHAR(36) ─────────────────────

@compiles(UUID, "sqlite")
def compile_uuid_sqlite(type_, compiler, **kw):
    return "CHAR(36)"


# Use SQLite async for tests (aiosqlite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(TEST_DATABASE_URL, echo=False)
test_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session."""
    async with test_session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide a test HTTP client with database override."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ─── Helper factories ─────────────────────────────────────────

@pytest_asyncio.fixture
async def make_user(db_session: AsyncSession):
    """Factory fixture for creating users."""
    async def _make(email: str | None = None, name: str | None = "Test User") -> User:
        user = User(
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            name=name,
        )
        db_session.add(user)
        await db_session.flush()
        await db_session.refresh(user)
        return user
    return _make


@pytest_asyncio.fixture
async def make_house(db_session: AsyncSession):
    """Factory fixture for creating houses."""
    async def _make(
        user: User,
        name: str | None = "Main Residence",
        address1: str = "12 Elm Street",
        city: str = "Springfield",
        state: str = "IL",
    ) -> House:
        house = House(
            user_id=user.id,
            name=name,
            address1=address1,
            city=city,
            state=state,
        )
        db_session.add(house)
        await db_session.flush()
        await db_session.refresh(house)
        return house
    return _make


@pytest_asyncio.fixture
async def make_room(db_session: AsyncSession):
    """Factory fixture for creating rooms."""
    async def _make(house: House, name: str = "Living Room", notes: str | None = None) -> Room:
        room = Room(house_id=house.id, name=name, notes=notes)
        db_session.add(room)
        await db_session.flush()
        await db_session.refresh(room)
        return room
    return _make


@pytest_asyncio.fixture
async def make_item(db_session: AsyncSession):
    """Factory fixture for creating manually entered items."""
    async def _make(
        room: Room,
        name: str = "Lamp",
        brand: str | None = None,
        model: str | None = None,
        **fields,
    ) -> Item:
        item = Item(
            room_id=room.id,
            name=name,
            brand=brand,
            model=model,
            price=fields.pop("price", Decimal("25.00")),
            status=fields.pop("status", "ACTIVE"),
            condition=fields.pop("condition", "GOOD"),
            is_imported=fields.pop("is_imported", False),
            **fields,
        )
        db_session.add(item)
        await db_session.flush()
        await db_session.refresh(item)
        return item
    return _make


@pytest_asyncio.fixture
async def reject_item_insert(db_session: AsyncSession):
    """Install a SQLite trigger that aborts any INSERT of an item with the given name."""
    async def _reject(name: str) -> None:
        literal = name.replace("'", "''")
        await db_session.execute(text(
            f"CREATE TRIGGER reject_item_{uuid.uuid4().hex[:8]} "
            f"BEFORE INSERT ON items WHEN NEW.name = '{literal}' "
            "BEGIN SELECT RAISE(ABORT, 'item rejected by storage'); END"
        ))
        await db_session.commit()
    return _reject
