"""SQLite engine and sessions for the metadata store (users and files tables)."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from files_manager.config import get_settings

Base = declarative_base()
log = logging.getLogger(__name__)

_settings = get_settings()
# SQLAlchemy async needs sqlite+aiosqlite and path as URL.
# NullPool: the worker runs every job in its own event loop, connections must not outlive it.
_db_url = f"sqlite+aiosqlite:///{_settings.db_path}"
_engine = create_async_engine(_db_url, echo=False, poolclass=NullPool)
_async_session = async_sessionmaker(
    _engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_db() -> None:
    """Create tables if they do not exist."""
    # Register models with Base before create_all
    from files_manager.files import models as _files  # noqa: F401
    from files_manager.users import models as _users  # noqa: F401

    _settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close all connections held by the engine (shutdown)."""
    await _engine.dispose()


async def is_alive() -> bool:
    """True if the metadata store answers a trivial query."""
    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        log.warning("Metadata store not reachable: %s", e)
        return False


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session (context manager)."""
    async with _async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async session."""
    async with get_session() as session:
        yield session
