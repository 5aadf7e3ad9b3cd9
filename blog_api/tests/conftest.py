import os

# Select the testing configuration before the app module builds its engine
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import blog_api.models  # noqa: F401
from blog_api.main import app
from blog_api.db.base import Base
from blog_api.db.session import get_db, enable_sqlite_foreign_keys
from blog_api.schemas.post_schema import PostCreate
from blog_api.schemas.user_schema import UserCreate, SessionContext
from blog_api.services.auth_service import AuthService
from blog_api.services.post_service import PostService
from blog_api.services.redis_service import get_redis_service

# Test database URL - in-memory SQLite
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

class FakeRedisService:
    """In-memory stand-in for the token blacklist"""

    def __init__(self):
        self.values = {}

    async def get(self, key):
        return self.values.get(key)

    async def setex(self, key, expire, value):
        self.values[key] = value

    async def close(self):
        pass

@pytest.fixture
async def test_engine():
    """Fresh schema for every test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()

@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with session_factory() as session:
        yield session

@pytest.fixture
def fake_redis():
    return FakeRedisService()

@pytest.fixture
async def test_client(session_factory, fake_redis) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app with the test database and Redis"""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_service] = lambda: fake_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

async def _create_user(db: AsyncSession, email: str, full_name: str):
    auth_service = AuthService(db)
    return await auth_service.create_user(
        UserCreate(email=email, password="Password123!", full_name=full_name)
    )

@pytest.fixture
async def test_user(test_db: AsyncSession):
    """Create a test user"""
    return await _create_user(test_db, "author@example.com", "Ada Author")

@pytest.fixture
async def other_user(test_db: AsyncSession):
    return await _create_user(test_db, "reader@example.com", "Rex Reader")

@pytest.fixture
def user_ctx(test_user) -> SessionContext:
    return SessionContext.for_user(test_user)

@pytest.fixture
def other_ctx(other_user) -> SessionContext:
    return SessionContext.for_user(other_user)

@pytest.fixture
def auth_headers(test_db, test_user) -> dict:
    token = AuthService(test_db).create_token_pair(test_user)["access_token"]
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def other_headers(test_db, other_user) -> dict:
    token = AuthService(test_db).create_token_pair(other_user)["access_token"]
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
async def test_post(test_db: AsyncSession, user_ctx: SessionContext):
    """A published post by the test user"""
    return await PostService(test_db).create_post(
        user_ctx,
        PostCreate(title="Hello Threads", content="First post body", tags=["intro"])
    )
