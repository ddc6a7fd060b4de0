"""Database session providers for FastAPI.

One lazily created engine per role ("write" and "read"), each with its own
pool and sessionmaker. Sessions never auto-commit: services open their own
``async with session.begin()`` block.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator, Callable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

_probe = DefaultConnectionProbe()
_engine_lock = threading.Lock()


class _EngineSlot:
    """Holds the engine and sessionmaker for one role until disposed."""

    def __init__(self, role: str, factory: Callable[[DatabaseSettings], AsyncEngine]):
        self.role = role
        self._factory = factory
        self.engine: AsyncEngine | None = None
        self.sessionmaker: async_sessionmaker[AsyncSession] | None = None

    def ensure(self) -> AsyncEngine:
        if self.engine is None:
            with _engine_lock:
                if self.engine is None:
                    settings = get_database_settings()
                    engine = self._factory(settings)
                    self.sessionmaker = async_sessionmaker(
                        engine, expire_on_commit=False, class_=AsyncSession
                    )
                    self.engine = engine
                    _probe.engine_created(self.role, settings.host, settings.database)
        return self.engine

    async def dispose(self) -> None:
        if self.engine is None:
            return
        engine, self.engine, self.sessionmaker = self.engine, None, None
        await engine.dispose()
        _probe.pool_closed(self.role)


_write = _EngineSlot("write", create_write_engine)
_read = _EngineSlot("read", create_read_engine)


def get_write_engine() -> AsyncEngine:
    """Get the write engine, creating it on first use."""
    return _write.ensure()


def get_read_engine() -> AsyncEngine:
    """Get the read engine, creating it on first use."""
    return _read.ensure()


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session on the write engine (FastAPI dependency)."""
    _write.ensure()
    assert _write.sessionmaker is not None

    async with _write.sessionmaker() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session on the read engine (FastAPI dependency).

    Read-only by convention; used for hierarchy and lookup reads.
    """
    _read.ensure()
    assert _read.sessionmaker is not None

    async with _read.sessionmaker() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose both engines so the next request recreates them."""
    await _write.dispose()
    await _read.dispose()
