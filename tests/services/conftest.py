"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched for code that uses it directly (readiness probe)
    - The admin account (id 1, admin/admin) is seeded before each client test
    - Outbound subscription fetches go through httpx.MockTransport

Design Decisions:
    - Each test builds its own app via create_app(): no shared ContentStore
    - StaticPool: every session shares the single in-memory connection
    - Fetch responses configured per test through the `remote` dict
"""

import httpx
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.core.security import issue_access_token
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
import app.infrastructure.database as db_module
import app.models  # noqa: F401
from app.main import create_app
from app.models.user import ADMIN_USER_ID
from app.services.content_store import ContentStore
from app.services.fetcher import SubscriptionFetcher
from app.services.user_service import ensure_admin_user


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt={"secret": "test-jwt-secret-with-enough-length-for-hs256"},
        static_dir=str(tmp_path / "no-frontend"),
    )


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def remote():
    """Canned upstream responses: url -> httpx.Response | Exception."""
    return {}


@pytest.fixture
def fetch_log():
    return []


@pytest.fixture
def mock_transport(remote, fetch_log):
    def handler(request: httpx.Request) -> httpx.Response:
        fetch_log.append(request)
        outcome = remote.get(str(request.url))
        if outcome is None:
            return httpx.Response(404, text="not found")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return httpx.MockTransport(handler)


@pytest.fixture
def content_store():
    return ContentStore()


@pytest.fixture
def fetcher(content_store, mock_transport):
    return SubscriptionFetcher(content_store, transport=mock_transport)


@pytest.fixture
def test_app(settings, content_store, fetcher):
    return create_app(settings, content_store=content_store, fetcher=fetcher)


@pytest.fixture
async def client(test_app, test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden and admin seeded."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    test_app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with test_session_factory() as session:
        await ensure_admin_user(session)

    async with AsyncClient(
        transport=ASGITransport(app=test_app), base_url="http://test",
    ) as c:
        yield c

    test_app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def auth_headers(settings):
    access = issue_access_token(
        ADMIN_USER_ID, settings.jwt.secret, settings.jwt.expires_in,
    )
    return {"Authorization": f"Bearer {access.token}"}
