"""
Database configuration using SQLAlchemy (asyncpg for PostgreSQL, aiosqlite for local runs)
"""
import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from sqlalchemy import text
from mogami_api.core.config import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    """Pool and driver options for the configured backend"""
    if database_url.startswith("sqlite"):
        # aiosqlite connections are bound to the loop that opened them
        return {"poolclass": NullPool}
    return {
        "pool_pre_ping": True,  # Test connections before using them
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_timeout": 30,
        "pool_recycle": 3600,
        "connect_args": {
            "command_timeout": 10,
            "server_settings": {
                "application_name": "mogami_api",
                "statement_timeout": "10000",
            },
        },
    }


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    **_engine_options(settings.DATABASE_URL),
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


def utcnow() -> datetime:
    """Client-side timestamp default (microsecond precision on every backend)"""
    return datetime.now(timezone.utc)


async def init_db():
    """
    Initialize database - create all tables
    """
    # Register every model on Base.metadata before create_all
    import mogami_api.models  # noqa: F401

    try:
        logger.info("Initializing database connection...")
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            logger.info("Database connection successful")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables initialized successfully")
    except TimeoutError as e:
        logger.error(f"Database connection timeout: {e}")
        logger.error(f"Database is accessible at: {settings.DATABASE_URL.split('@')[-1] if '@' in settings.DATABASE_URL else 'unknown'}")
        raise
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        logger.error(f"Database driver: {settings.DATABASE_URL.split('://')[0]}")
        raise


async def close_db():
    """
    Close database connections
    """
    await engine.dispose()
