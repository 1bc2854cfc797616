"""
Database engine and session factory.

PostgreSQL (asyncpg) in production; a SQLite URL (aiosqlite) works for
local runs and gets no connection-pool sizing.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from fleet_backend.app.core.config import settings


def engine_options(database_url: str) -> dict:
    options = {"echo": settings.db_echo}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

# Sessions keep loaded attributes after commit so endpoints can serialize them
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    One session per request; it is closed when the request finishes.
    """
    async with AsyncSessionLocal() as session:
        yield session
