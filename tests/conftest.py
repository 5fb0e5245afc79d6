"""
College ERP holidays - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Callable
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

# Set testing environment
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_holidays.db'
os.environ['DATABASE_URL'] = TEST_DATABASE_URL
os.environ['LOG_LEVEL'] = 'WARNING'

from erp_backend.main import app
from erp_backend.db import Base, get_db
from erp_backend.services import holidays as holiday_service
import erp_backend.models  # noqa: F401

# Test database setup
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_holiday(db_session: AsyncSession) -> Callable:
    """Create a holiday through the service layer with sensible defaults"""
    async def _make(name: str = 'Republic Day', date: str = '2025-01-26', type: str = 'Gazetted', **extra):
        payload = {'name': name, 'date': date, 'type': type, **extra}
        return await holiday_service.create_holiday(db_session, payload)

    return _make
