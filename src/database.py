"""
QuickJob - Database Connection and Session Management
"""

import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from src.config import settings
from src.errors import StoreFailure

logger = logging.getLogger(__name__)


# Create async engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
)

# Session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# Base class for models
class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncSession:
    """Dependency that provides a database session."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def atomic(db: AsyncSession):
    """
    Run a multi-statement unit of work as a single transaction.

    Commits when the block exits cleanly. Any exception rolls everything
    back; SQLAlchemy errors are re-raised as StoreFailure so callers never
    see driver detail.
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Store failure, transaction rolled back")
        raise StoreFailure() from e
    except BaseException:
        await db.rollback()
        raise


async def init_db():
    """Create all database tables."""
    # Import models to ensure they're registered with Base.metadata
    from src.models import (  # noqa: F401
        Account, Credential, VerificationRecord, Conversation, Message,
        Notification, BookingRequest, Profile, Rating,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections."""
    await engine.dispose()
