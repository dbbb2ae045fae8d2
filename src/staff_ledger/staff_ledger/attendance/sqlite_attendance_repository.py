from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import from_iso, parse_iso_date, to_iso
from ..core.enums import AttendanceStatus, WorkLocation
from ..core.exceptions import AlreadyCheckedIn, DuplicateRecord
from ..database.connection import Database
from ..database.sqlite_base import as_bool, db_session, execute, fetchall, fetchone
from .model import AttendanceRecord, Coordinates
from .repository import AttendanceRepository

_COLUMNS = (
    "record_id, business_id, staff_id, work_date, check_in_time, check_out_time, location, latitude, longitude, "
    "status, is_late, working_hours, notes, created_at, updated_at"
)


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    coordinates = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        coordinates = Coordinates(lat=float(r["latitude"]), lng=float(r["longitude"]))

    return AttendanceRecord(
        record_id=r["record_id"],
        business_id=r["business_id"],
        staff_id=r["staff_id"],
        work_date=parse_iso_date(r["work_date"]),
        check_in_time=from_iso(r.get("check_in_time")),
        check_out_time=from_iso(r.get("check_out_time")),
        location=WorkLocation(r["location"]),
        status=AttendanceStatus(r["status"]),
        is_late=as_bool(r.get("is_late")),
        working_hours=float(r["working_hours"]) if r.get("working_hours") is not None else None,
        coordinates=coordinates,
        notes=r.get("notes"),
        created_at=from_iso(r.get("created_at")),
        updated_at=from_iso(r.get("updated_at")),
    )


class SQLiteAttendanceRepository(AttendanceRepository):
    def __init__(self, database: Database):
        self._db = database

    async def get_for_staff_and_date(self, business_id: str, staff_id: str, work_date: date) -> Optional[AttendanceRecord]:
        async with db_session(self._db) as conn:
            r = await fetchone(
                conn,
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE business_id=:bid AND staff_id=:sid AND work_date=:d
                """,
                {"bid": business_id, "sid": staff_id, "d": work_date.isoformat()},
            )
            return _row_to_record(r) if r else None

    async def create_checkin(self, record: AttendanceRecord) -> None:
        try:
            async with db_session(self._db) as conn:
                await execute(
                    conn,
                    f"""
                    INSERT INTO attendance_records ({_COLUMNS})
                    VALUES (:record_id, :business_id, :staff_id, :work_date, :check_in_time, NULL, :location,
                            :latitude, :longitude, :status, :is_late, NULL, :notes, :created_at, NULL)
                    """,
                    {
                        "record_id": record.record_id,
                        "business_id": record.business_id,
                        "staff_id": record.staff_id,
                        "work_date": record.work_date.isoformat(),
                        "check_in_time": to_iso(record.check_in_time),
                        "location": record.location.value,
                        "latitude": record.coordinates.lat if record.coordinates else None,
                        "longitude": record.coordinates.lng if record.coordinates else None,
                        "status": record.status.value,
                        "is_late": 1 if record.is_late else 0,
                        "notes": record.notes,
                        "created_at": to_iso(record.created_at),
                    },
                )
        except DuplicateRecord as exc:
            # ux_attendance_daily: the store itself refuses a second record for the day.
            raise AlreadyCheckedIn("Already checked in today") from exc
        self._db.changes.publish("attendance_records", "insert", record.record_id)

    async def update_checkout(
        self,
        *,
        record_id: str,
        check_out_time: datetime,
        working_hours: float,
        notes: Optional[str] = None,
    ) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(
                conn,
                """
                UPDATE attendance_records
                SET check_out_time=:out, working_hours=:hours, notes=COALESCE(:notes, notes), updated_at=:out
                WHERE record_id=:id AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                {"out": to_iso(check_out_time), "hours": float(working_hours), "notes": notes, "id": record_id},
            )
            updated = result.rowcount > 0
        if updated:
            self._db.changes.publish("attendance_records", "update", record_id)
        return updated

    async def list_by_date_range(self, business_id: str, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        async with db_session(self._db) as conn:
            rows = await fetchall(
                conn,
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE business_id=:bid AND work_date BETWEEN :start AND :end
                """,
                {"bid": business_id, "start": start_date.isoformat(), "end": end_date.isoformat()},
            )
            return [_row_to_record(r) for r in rows]

    async def list_by_staff(self, staff_id: str, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        sql = f"SELECT {_COLUMNS} FROM attendance_records WHERE staff_id=:sid ORDER BY work_date DESC"
        params: Dict[str, Any] = {"sid": staff_id}
        if limit is not None:
            sql += " LIMIT :limit"
            params["limit"] = int(limit)

        async with db_session(self._db) as conn:
            rows = await fetchall(conn, sql, params)
            return [_row_to_record(r) for r in rows]
