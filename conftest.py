import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from kanban_board.core import Settings, get_settings
from kanban_board.db.database import enable_sqlite_foreign_keys, get_async_session
from kanban_board.db.models import Base
from kanban_board.main import app

TEST_API_KEY = "test-secret-key"


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test, foreign keys enforced"""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, autoflush=False, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_settings():
    return Settings(KANBAN_API_KEY=TEST_API_KEY)


@pytest_asyncio.fixture
async def client(db, test_settings):
    """HTTP client against the app, sharing the test session"""
    async def override_session():
        yield db

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-API-Key": TEST_API_KEY},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
