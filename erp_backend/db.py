"""
Database configuration and session management
SQLAlchemy asyncio engine over MySQL (aiomysql); DATABASE_URL overrides the MySQL settings.
"""
import os
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional
import logging

from dotenv import load_dotenv

# SQLAlchemy imports
from sqlalchemy import DateTime  # type: ignore
from sqlalchemy.types import TypeDecorator  # type: ignore
from sqlalchemy.dialects import mysql  # type: ignore
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker  # type: ignore
from sqlalchemy.orm import declarative_base  # type: ignore

load_dotenv()

# Database Configuration
MYSQL_HOST = os.getenv("MYSQL_HOST", "localhost")
MYSQL_PORT = int(os.getenv("MYSQL_PORT", 3306))
MYSQL_USER = os.getenv("MYSQL_USER", "root")
MYSQL_PASSWORD = os.getenv("MYSQL_PASSWORD", "")
MYSQL_DATABASE = os.getenv("MYSQL_DATABASE", "college_erp_db")
MYSQL_CHARSET = os.getenv("MYSQL_CHARSET", "utf8mb4")

DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 10))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 20))

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+aiomysql://{MYSQL_USER}:{MYSQL_PASSWORD}@{MYSQL_HOST}:{MYSQL_PORT}/{MYSQL_DATABASE}?charset={MYSQL_CHARSET}",
)


def _engine_options(url: str) -> dict:
    """Pool sizing only applies to server databases; SQLite picks its own pool."""
    options = {"echo": False, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        options.update(pool_size=DB_POOL_SIZE, max_overflow=DB_MAX_OVERFLOW)
    return options


# Create async engine
engine = create_async_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for SQLAlchemy models
Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware instant stored as naive UTC.

    MySQL DATETIME and SQLite both drop the offset, so every value is shifted
    to UTC on the way in and tagged as UTC on the way out.
    """
    impl = DateTime
    cache_ok = True

    def load_dialect_impl(self, dialect):
        # MySQL DATETIME drops fractional seconds unless fsp is set
        if dialect.name == "mysql":
            return dialect.type_descriptor(mysql.DATETIME(fsp=6))
        return dialect.type_descriptor(DateTime())

    def process_bind_param(self, value: Optional[datetime], dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.astimezone()
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: Optional[datetime], dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# SQLAlchemy dependency for FastAPI
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get SQLAlchemy database session (FastAPI dependency).

    Example:
        @router.get("/holidays")
        async def list_holidays(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """
    Initialize database - create all tables using SQLAlchemy models.
    This is called on application startup.
    """
    # Register the tables on Base.metadata
    import erp_backend.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized: %s", engine.url.render_as_string(hide_password=True))


async def close_db():
    """Close database connections"""
    await engine.dispose()
    logger.info("Database connections closed")
