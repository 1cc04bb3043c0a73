"""
Database configuration with async support
"""

import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel
from typing import AsyncGenerator

from tastebuddy.core.config import settings

# Configure logging based on environment
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

logger.info(f"Environment: {settings.ENVIRONMENT}")


def build_engine(url: str, echo: bool = False):
    """Create the async engine; pool tuning only applies to server databases."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo, future=True)

    return create_async_engine(
        url,
        echo=echo,
        future=True,  # Required for SQLModel async support
        pool_size=20,  # Number of connections to maintain
        max_overflow=30,  # Additional connections that can be created
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=3600,  # Recycle connections after 1 hour
        connect_args={
            "server_settings": {
                "application_name": "tastebuddy_api",
            }
        }
    )


async_engine = build_engine(settings.ASYNC_DATABASE_URL, echo=settings.SQL_ECHO)

# Async session factory
AsyncSessionLocal = sessionmaker(
    bind=async_engine,
    class_=AsyncSessionSQLModel,
    expire_on_commit=False,
    autoflush=False
)


async def init_db():
    """Initialize database tables"""
    import tastebuddy.models  # noqa: F401  registers every table on the metadata

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async database session dependency
    Usage:
    async def some_endpoint(db: AsyncSession = Depends(get_db)):
        ...
    """
    try:
        async with AsyncSessionLocal() as session:
            yield session
    except SQLAlchemyError as e:
        logger.error(f"Database session failed: {str(e)}", exc_info=True)
        raise
