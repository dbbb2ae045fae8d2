from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import from_iso, parse_iso_date, to_iso
from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import Database
from ..database.sqlite_base import db_session, execute, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = (
    "request_id, business_id, staff_id, leave_type, start_date, end_date, reason, status, requested_at, "
    "approved_by, approved_at, rejected_by, rejected_at, rejection_reason"
)


def _row_to_leave(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=r["request_id"],
        business_id=r["business_id"],
        staff_id=r["staff_id"],
        leave_type=LeaveType(r["leave_type"]),
        start_date=parse_iso_date(r["start_date"]),
        end_date=parse_iso_date(r["end_date"]),
        reason=r.get("reason") or "",
        status=LeaveStatus(r["status"]),
        requested_at=from_iso(r["requested_at"]),
        approved_by=r.get("approved_by"),
        approved_at=from_iso(r.get("approved_at")),
        rejected_by=r.get("rejected_by"),
        rejected_at=from_iso(r.get("rejected_at")),
        rejection_reason=r.get("rejection_reason"),
    )


class SQLiteLeaveRepository(LeaveRepository):
    def __init__(self, database: Database):
        self._db = database

    async def add(self, request: LeaveRequest) -> None:
        async with db_session(self._db) as conn:
            await execute(
                conn,
                """
                INSERT INTO leave_requests (
                    request_id, business_id, staff_id, leave_type, start_date, end_date, reason, status, requested_at
                )
                VALUES (:request_id, :business_id, :staff_id, :leave_type, :start_date, :end_date, :reason, :status,
                        :requested_at)
                """,
                {
                    "request_id": request.request_id,
                    "business_id": request.business_id,
                    "staff_id": request.staff_id,
                    "leave_type": request.leave_type.value,
                    "start_date": request.start_date.isoformat(),
                    "end_date": request.end_date.isoformat(),
                    "reason": request.reason,
                    "status": request.status.value,
                    "requested_at": to_iso(request.requested_at),
                },
            )
        self._db.changes.publish("leave_requests", "insert", request.request_id)

    async def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        async with db_session(self._db) as conn:
            r = await fetchone(conn, f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=:id", {"id": request_id})
            return _row_to_leave(r) if r else None

    async def list_for_business(
        self, business_id: str, *, status: Optional[LeaveStatus] = None
    ) -> Sequence[LeaveRequest]:
        sql = f"SELECT {_COLUMNS} FROM leave_requests WHERE business_id=:bid"
        params: Dict[str, Any] = {"bid": business_id}
        if status is not None:
            sql += " AND status=:status"
            params["status"] = status.value
        sql += " ORDER BY requested_at DESC"

        async with db_session(self._db) as conn:
            rows = await fetchall(conn, sql, params)
            return [_row_to_leave(r) for r in rows]

    async def list_by_staff(self, staff_id: str) -> Sequence[LeaveRequest]:
        async with db_session(self._db) as conn:
            rows = await fetchall(
                conn,
                f"SELECT {_COLUMNS} FROM leave_requests WHERE staff_id=:sid ORDER BY requested_at DESC",
                {"sid": staff_id},
            )
            return [_row_to_leave(r) for r in rows]

    async def mark_approved(self, *, request_id: str, approved_by: str, approved_at: datetime) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(
                conn,
                """
                UPDATE leave_requests
                SET status=:status, approved_by=:by, approved_at=:at
                WHERE request_id=:id AND status=:pending
                """,
                {
                    "status": LeaveStatus.APPROVED.value,
                    "by": approved_by,
                    "at": to_iso(approved_at),
                    "id": request_id,
                    "pending": LeaveStatus.PENDING.value,
                },
            )
            updated = result.rowcount > 0
        if updated:
            self._db.changes.publish("leave_requests", "update", request_id)
        return updated

    async def mark_rejected(
        self, *, request_id: str, rejected_by: str, rejected_at: datetime, rejection_reason: str
    ) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(
                conn,
                """
                UPDATE leave_requests
                SET status=:status, rejected_by=:by, rejected_at=:at, rejection_reason=:reason
                WHERE request_id=:id AND status=:pending
                """,
                {
                    "status": LeaveStatus.REJECTED.value,
                    "by": rejected_by,
                    "at": to_iso(rejected_at),
                    "reason": rejection_reason,
                    "id": request_id,
                    "pending": LeaveStatus.PENDING.value,
                },
            )
            updated = result.rowcount > 0
        if updated:
            self._db.changes.publish("leave_requests", "update", request_id)
        return updated
