"""
Database session management with SQLAlchemy async
"""

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from core.config import settings
from core.exceptions import ConfigurationError
import logging

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_maker: Optional[async_sessionmaker] = None


def get_engine() -> AsyncEngine:
    """Create the async engine on first use."""
    global _engine, _session_maker

    if _engine is None:
        if not settings.DATABASE_URL:
            raise ConfigurationError(
                "DATABASE_URL is not set",
                context={"setting": "DATABASE_URL"}
            )

        _engine = create_async_engine(
            settings.DATABASE_URL,
            echo=False,
            poolclass=NullPool,
            future=True
        )
        _session_maker = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )
        logger.debug("Database engine created")

    return _engine


def get_session_maker() -> async_sessionmaker:
    """Session factory bound to the application engine"""
    get_engine()
    return _session_maker


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session"""
    async with get_session_maker()() as session:
        yield session


async def dispose_engine():
    global _engine, _session_maker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_maker = None
