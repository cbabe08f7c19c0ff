"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from mclp_backend.app.main import app
from mclp_backend.app.db.session import get_db, Base
from mclp_backend.app.core.jwt import create_access_token
from mclp_backend.app.services.blob_storage import LocalBlobStorage, get_blob_storage

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

OWNER_A = "user-a"
OWNER_B = "user-b"


@pytest.fixture
def upload_dir(tmp_path):
    """Per-test blob directory."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def blob_storage(upload_dir):
    return LocalBlobStorage(str(upload_dir))


@pytest.fixture(autouse=True)
def apply_overrides(blob_storage):
    """Point the app at the test database and the per-test upload directory."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_storage] = lambda: blob_storage
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    """Session for direct repository tests and fixture data."""
    async with TestingSessionLocal() as session:
        yield session


def auth_headers(user_id: str) -> dict:
    token = create_access_token(data={"sub": f"{user_id}@example.com", "user_id": user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_a_headers():
    return auth_headers(OWNER_A)


@pytest.fixture
def owner_b_headers():
    return auth_headers(OWNER_B)
