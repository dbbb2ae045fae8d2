from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import format_hhmm, from_iso, parse_hhmm, to_iso
from ..database.connection import Database
from ..database.sqlite_base import as_bool, db_session, execute, fetchall, fetchone
from .model import Shift
from .repository import ShiftRepository

_COLUMNS = "shift_id, business_id, name, start_time, end_time, break_minutes, days_of_week, is_active, created_at"


def _encode_days(days) -> str:
    return ",".join(str(d) for d in sorted(days))


def _decode_days(value: Optional[str]) -> frozenset:
    if not value:
        return frozenset()
    return frozenset(int(d) for d in value.split(",") if d.strip())


def _row_to_shift(r: Dict[str, Any]) -> Shift:
    return Shift(
        shift_id=r["shift_id"],
        business_id=r["business_id"],
        name=r["name"],
        start_time=parse_hhmm(r["start_time"]),
        end_time=parse_hhmm(r["end_time"]),
        break_minutes=int(r.get("break_minutes") or 0),
        days_of_week=_decode_days(r.get("days_of_week")),
        is_active=as_bool(r.get("is_active")),
        created_at=from_iso(r.get("created_at")),
    )


def _params(shift: Shift) -> Dict[str, Any]:
    return {
        "shift_id": shift.shift_id,
        "business_id": shift.business_id,
        "name": shift.name,
        "start_time": format_hhmm(shift.start_time),
        "end_time": format_hhmm(shift.end_time),
        "break_minutes": int(shift.break_minutes),
        "days_of_week": _encode_days(shift.days_of_week),
        "is_active": 1 if shift.is_active else 0,
        "created_at": to_iso(shift.created_at),
    }


class SQLiteShiftRepository(ShiftRepository):
    def __init__(self, database: Database):
        self._db = database

    async def add(self, shift: Shift) -> None:
        async with db_session(self._db) as conn:
            await execute(
                conn,
                f"""
                INSERT INTO shifts ({_COLUMNS})
                VALUES (:shift_id, :business_id, :name, :start_time, :end_time, :break_minutes,
                        :days_of_week, :is_active, :created_at)
                """,
                _params(shift),
            )
        self._db.changes.publish("shifts", "insert", shift.shift_id)

    async def update(self, shift: Shift) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(
                conn,
                """
                UPDATE shifts
                SET name=:name, start_time=:start_time, end_time=:end_time, break_minutes=:break_minutes,
                    days_of_week=:days_of_week, is_active=:is_active
                WHERE shift_id=:shift_id
                """,
                _params(shift),
            )
            updated = result.rowcount > 0
        if updated:
            self._db.changes.publish("shifts", "update", shift.shift_id)
        return updated

    async def delete(self, shift_id: str) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(conn, "DELETE FROM shifts WHERE shift_id=:id", {"id": shift_id})
            deleted = result.rowcount > 0
            await execute(conn, "DELETE FROM shift_assignments WHERE shift_id=:id", {"id": shift_id})
        if deleted:
            self._db.changes.publish("shifts", "delete", shift_id)
        return deleted

    async def get_by_id(self, shift_id: str) -> Optional[Shift]:
        async with db_session(self._db) as conn:
            r = await fetchone(conn, f"SELECT {_COLUMNS} FROM shifts WHERE shift_id=:id", {"id": shift_id})
            return _row_to_shift(r) if r else None

    async def list_for_business(self, business_id: str) -> Sequence[Shift]:
        async with db_session(self._db) as conn:
            rows = await fetchall(
                conn,
                f"SELECT {_COLUMNS} FROM shifts WHERE business_id=:bid ORDER BY start_time, name",
                {"bid": business_id},
            )
            return [_row_to_shift(r) for r in rows]

    async def assign(self, *, business_id: str, staff_id: str, shift_id: str) -> None:
        async with db_session(self._db) as conn:
            await execute(
                conn,
                """
                INSERT INTO shift_assignments (business_id, staff_id, shift_id)
                VALUES (:bid, :sid, :shift_id)
                ON CONFLICT (business_id, staff_id) DO UPDATE SET shift_id=excluded.shift_id
                """,
                {"bid": business_id, "sid": staff_id, "shift_id": shift_id},
            )
        self._db.changes.publish("shift_assignments", "upsert", f"{business_id}:{staff_id}")

    async def unassign(self, *, business_id: str, staff_id: str) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(
                conn,
                "DELETE FROM shift_assignments WHERE business_id=:bid AND staff_id=:sid",
                {"bid": business_id, "sid": staff_id},
            )
            deleted = result.rowcount > 0
        if deleted:
            self._db.changes.publish("shift_assignments", "delete", f"{business_id}:{staff_id}")
        return deleted

    async def get_assigned_shift_id(self, *, business_id: str, staff_id: str) -> Optional[str]:
        async with db_session(self._db) as conn:
            r = await fetchone(
                conn,
                "SELECT shift_id FROM shift_assignments WHERE business_id=:bid AND staff_id=:sid",
                {"bid": business_id, "sid": staff_id},
            )
            return r["shift_id"] if r else None
