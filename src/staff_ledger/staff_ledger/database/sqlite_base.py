from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from ..core.exceptions import DuplicateRecord, StorageFailure
from .connection import Database


@asynccontextmanager
async def db_session(database: Database) -> AsyncIterator[AsyncConnection]:
    """One transaction per repository call; commits on success, rolls back on error.

    Sessions on an in-memory store are serialized because they all share one
    connection. Sessions must not be nested.
    """
    lock = database.shared_connection_lock
    if lock is None:
        async with _transaction(database) as conn:
            yield conn
        return

    async with lock:
        async with _transaction(database) as conn:
            yield conn


@asynccontextmanager
async def _transaction(database: Database) -> AsyncIterator[AsyncConnection]:
    try:
        async with database.engine.begin() as conn:
            yield conn
    except IntegrityError as exc:
        raise DuplicateRecord(str(exc.orig or exc)) from exc
    except SQLAlchemyError as exc:
        raise StorageFailure(str(exc)) from exc


async def execute(conn: AsyncConnection, sql: str, params: Optional[Dict[str, Any]] = None):
    return await conn.execute(text(sql), params or {})


async def fetchone(conn: AsyncConnection, sql: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    result = await conn.execute(text(sql), params or {})
    row = result.mappings().first()
    return dict(row) if row else None


async def fetchall(conn: AsyncConnection, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    result = await conn.execute(text(sql), params or {})
    return [dict(r) for r in result.mappings().all()]


def as_bool(value: Any) -> bool:
    return bool(int(value)) if value is not None else False
