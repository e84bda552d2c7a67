import os

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from app.database import get_session
from app.dependencies.auth import create_access_token
from app.main import app
from app.models.property import Base, Property, PropertyType, User

TEST_SECRET = "test-secret"

@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # sqlite only enforces foreign keys when asked, Postgres always does
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()

@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()

@pytest_asyncio.fixture
async def users(session_factory):
    alice = User(username="alice", email="alice@example.com", password="hashed-alice", profile_img="alice.png")
    bob = User(username="bob", email="bob@example.com", password="hashed-bob")
    async with session_factory() as session:
        session.add_all([alice, bob])
        await session.commit()
    return {"alice": alice, "bob": bob}

@pytest.fixture
def auth_headers():
    def _headers(user_id, secret=TEST_SECRET, expires_minutes=60):
        token = create_access_token(user_id, secret, expires_minutes=expires_minutes)
        return {"Authorization": f"Bearer {token}"}
    return _headers

@pytest.fixture
def add_property(session_factory):
    async def _add(owner, type=PropertyType.beach, featured=False, **fields):
        fields.setdefault("title", f"{type.value} house")
        prop = Property(current_owner_id=owner.id, type=type, featured=featured, extras={}, **fields)
        async with session_factory() as session:
            session.add(prop)
            await session.commit()
        return prop
    return _add
