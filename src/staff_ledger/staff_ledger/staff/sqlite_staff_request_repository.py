from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import from_iso, to_iso
from ..core.enums import Role, StaffRequestStatus
from ..core.exceptions import DuplicateRecord, ValidationError
from ..database.connection import Database
from ..database.sqlite_base import db_session, execute, fetchall, fetchone
from .model import StaffRequest
from .repository import StaffRequestRepository

_COLUMNS = "request_id, business_id, staff_id, full_name, email, role, status, reason, created_at, decided_at"


def _row_to_request(r: Dict[str, Any]) -> StaffRequest:
    return StaffRequest(
        request_id=r["request_id"],
        business_id=r["business_id"],
        staff_id=r["staff_id"],
        full_name=r["full_name"],
        email=r.get("email"),
        role=Role(r["role"]),
        status=StaffRequestStatus(r["status"]),
        reason=r.get("reason"),
        created_at=from_iso(r["created_at"]),
        decided_at=from_iso(r.get("decided_at")),
    )


class SQLiteStaffRequestRepository(StaffRequestRepository):
    def __init__(self, database: Database):
        self._db = database

    async def add(self, request: StaffRequest) -> None:
        try:
            async with db_session(self._db) as conn:
                await execute(
                    conn,
                    f"""
                    INSERT INTO staff_requests ({_COLUMNS})
                    VALUES (:request_id, :business_id, :staff_id, :full_name, :email, :role, :status, :reason,
                            :created_at, NULL)
                    """,
                    {
                        "request_id": request.request_id,
                        "business_id": request.business_id,
                        "staff_id": request.staff_id,
                        "full_name": request.full_name,
                        "email": request.email,
                        "role": request.role.value,
                        "status": request.status.value,
                        "reason": request.reason,
                        "created_at": to_iso(request.created_at),
                    },
                )
        except DuplicateRecord as exc:
            # ux_staff_requests_open
            raise ValidationError("Staff member already has an open request for this business") from exc
        self._db.changes.publish("staff_requests", "insert", request.request_id)

    async def find_open(self, business_id: str, staff_id: str) -> Optional[StaffRequest]:
        async with db_session(self._db) as conn:
            r = await fetchone(
                conn,
                f"""
                SELECT {_COLUMNS}
                FROM staff_requests
                WHERE business_id=:bid AND staff_id=:sid AND status IN (:pending, :active)
                """,
                {
                    "bid": business_id,
                    "sid": staff_id,
                    "pending": StaffRequestStatus.PENDING.value,
                    "active": StaffRequestStatus.ACTIVE.value,
                },
            )
            return _row_to_request(r) if r else None

    async def get_by_id(self, request_id: str) -> Optional[StaffRequest]:
        async with db_session(self._db) as conn:
            r = await fetchone(conn, f"SELECT {_COLUMNS} FROM staff_requests WHERE request_id=:id", {"id": request_id})
            return _row_to_request(r) if r else None

    async def list_for_business(
        self, business_id: str, *, status: Optional[StaffRequestStatus] = None
    ) -> Sequence[StaffRequest]:
        sql = f"SELECT {_COLUMNS} FROM staff_requests WHERE business_id=:bid"
        params: Dict[str, Any] = {"bid": business_id}
        if status is not None:
            sql += " AND status=:status"
            params["status"] = status.value
        sql += " ORDER BY created_at"

        async with db_session(self._db) as conn:
            rows = await fetchall(conn, sql, params)
            return [_row_to_request(r) for r in rows]

    async def count_active(self, business_id: str) -> int:
        async with db_session(self._db) as conn:
            r = await fetchone(
                conn,
                "SELECT COUNT(*) AS n FROM staff_requests WHERE business_id=:bid AND status=:status",
                {"bid": business_id, "status": StaffRequestStatus.ACTIVE.value},
            )
            return int(r["n"]) if r else 0

    async def decide(
        self,
        *,
        request_id: str,
        status: StaffRequestStatus,
        decided_at: datetime,
        reason: Optional[str] = None,
    ) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(
                conn,
                """
                UPDATE staff_requests
                SET status=:status, decided_at=:decided_at, reason=:reason
                WHERE request_id=:id AND status=:pending
                """,
                {
                    "status": status.value,
                    "decided_at": to_iso(decided_at),
                    "reason": reason,
                    "id": request_id,
                    "pending": StaffRequestStatus.PENDING.value,
                },
            )
            updated = result.rowcount > 0
        if updated:
            self._db.changes.publish("staff_requests", "update", request_id)
        return updated
