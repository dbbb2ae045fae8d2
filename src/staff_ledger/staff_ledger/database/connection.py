from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from .changes import ChangeFeed


@dataclass
class DBConfig:
    url: str
    echo: bool = False


class Database:
    """Owns the async engine and the change feed for one application context.

    Note: Built once by the container and passed to every repository; each
    repository call opens a short-lived transaction on it.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        kwargs: dict = {"echo": bool(config.echo), "future": True}
        self._shared_lock: Optional[asyncio.Lock] = None
        if ":memory:" in config.url:
            # One shared connection, otherwise every checkout sees an empty database.
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
            # Transactions on the shared connection must not interleave.
            self._shared_lock = asyncio.Lock()
        self._engine: AsyncEngine = create_async_engine(config.url, **kwargs)
        self.changes = ChangeFeed()

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def shared_connection_lock(self) -> Optional[asyncio.Lock]:
        """Set only when every session shares one connection (in-memory store)."""
        return self._shared_lock

    async def dispose(self) -> None:
        await self._engine.dispose()
