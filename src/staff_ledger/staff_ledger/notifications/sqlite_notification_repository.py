from __future__ import annotations

import json
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Sequence

from ..common.datetime_utils import from_iso, now_local, to_iso
from ..database.connection import Database
from ..database.sqlite_base import as_bool, db_session, execute, fetchall, fetchone
from .model import Notification, NotificationEvent
from .sink import NotificationSink

_COLUMNS = "notification_id, business_id, recipient_id, type, title, message, data, is_read, created_at"


def _row_to_notification(r: Dict[str, Any]) -> Notification:
    return Notification(
        notification_id=r["notification_id"],
        business_id=r["business_id"],
        recipient_id=r.get("recipient_id"),
        type=r["type"],
        title=r["title"],
        message=r["message"],
        data=json.loads(r["data"]) if r.get("data") else {},
        read=as_bool(r.get("is_read")),
        created_at=from_iso(r["created_at"]),
    )


class SQLiteNotificationRepository(NotificationSink):
    """Local notification inbox; doubles as the sink the ledgers notify."""

    def __init__(self, database: Database, *, clock: Callable[[], datetime] = now_local):
        self._db = database
        self._clock = clock

    async def notify(self, event: NotificationEvent) -> None:
        await self.create(event)

    async def create(self, event: NotificationEvent) -> Notification:
        notification = Notification(
            notification_id=f"notif_{uuid.uuid4()}",
            business_id=event.business_id,
            recipient_id=event.recipient_id,
            type=event.type.value,
            title=event.title,
            message=event.message,
            data=dict(event.data),
            read=False,
            created_at=self._clock(),
        )
        async with db_session(self._db) as conn:
            await execute(
                conn,
                f"""
                INSERT INTO notifications ({_COLUMNS})
                VALUES (:notification_id, :business_id, :recipient_id, :type, :title, :message, :data, 0, :created_at)
                """,
                {
                    "notification_id": notification.notification_id,
                    "business_id": notification.business_id,
                    "recipient_id": notification.recipient_id,
                    "type": notification.type,
                    "title": notification.title,
                    "message": notification.message,
                    "data": json.dumps(notification.data, default=str),
                    "created_at": to_iso(notification.created_at),
                },
            )
        self._db.changes.publish("notifications", "insert", notification.notification_id)
        return notification

    async def get(self, notification_id: str) -> Optional[Notification]:
        async with db_session(self._db) as conn:
            r = await fetchone(
                conn,
                f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=:id",
                {"id": notification_id},
            )
            return _row_to_notification(r) if r else None

    async def list_for_business(self, business_id: str, recipient_id: Optional[str] = None) -> Sequence[Notification]:
        """Newest first. Notifications without a recipient are visible to everyone."""
        sql = f"SELECT {_COLUMNS} FROM notifications WHERE business_id=:bid"
        params: Dict[str, Any] = {"bid": business_id}
        if recipient_id:
            sql += " AND (recipient_id IS NULL OR recipient_id=:rid)"
            params["rid"] = recipient_id
        sql += " ORDER BY created_at DESC"

        async with db_session(self._db) as conn:
            rows = await fetchall(conn, sql, params)
            return [_row_to_notification(r) for r in rows]

    async def mark_as_read(self, notification_id: str) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(
                conn,
                "UPDATE notifications SET is_read=1 WHERE notification_id=:id",
                {"id": notification_id},
            )
            return result.rowcount > 0

    async def mark_all_as_read(self, business_id: str, recipient_id: Optional[str] = None) -> int:
        sql = "UPDATE notifications SET is_read=1 WHERE business_id=:bid AND is_read=0"
        params: Dict[str, Any] = {"bid": business_id}
        if recipient_id:
            sql += " AND (recipient_id IS NULL OR recipient_id=:rid)"
            params["rid"] = recipient_id

        async with db_session(self._db) as conn:
            result = await execute(conn, sql, params)
            return int(result.rowcount)

    async def unread_count(self, business_id: str, recipient_id: Optional[str] = None) -> int:
        return sum(1 for n in await self.list_for_business(business_id, recipient_id) if not n.read)

    async def delete(self, notification_id: str) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(conn, "DELETE FROM notifications WHERE notification_id=:id", {"id": notification_id})
            return result.rowcount > 0
