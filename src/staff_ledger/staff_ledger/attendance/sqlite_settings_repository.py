from __future__ import annotations

from typing import Optional

from ..database.connection import Database
from ..database.sqlite_base import as_bool, db_session, execute, fetchone
from .settings import AttendanceSettings, AttendanceSettingsRepository


class SQLiteAttendanceSettingsRepository(AttendanceSettingsRepository):
    def __init__(self, database: Database):
        self._db = database

    async def get(self, business_id: str) -> Optional[AttendanceSettings]:
        async with db_session(self._db) as conn:
            r = await fetchone(
                conn,
                """
                SELECT business_id, late_threshold_minutes, overtime_threshold_minutes, geo_fencing_enabled,
                       geo_fence_radius, face_verification_enabled, auto_checkout_enabled, auto_checkout_time,
                       allow_wfh
                FROM attendance_settings
                WHERE business_id=:bid
                """,
                {"bid": business_id},
            )
            if not r:
                return None
            return AttendanceSettings(
                business_id=r["business_id"],
                late_threshold_minutes=int(r["late_threshold_minutes"]),
                overtime_threshold_minutes=int(r["overtime_threshold_minutes"]),
                geo_fencing_enabled=as_bool(r["geo_fencing_enabled"]),
                geo_fence_radius=int(r["geo_fence_radius"]),
                face_verification_enabled=as_bool(r["face_verification_enabled"]),
                auto_checkout_enabled=as_bool(r["auto_checkout_enabled"]),
                auto_checkout_time=r.get("auto_checkout_time"),
                allow_wfh=as_bool(r["allow_wfh"]),
            )

    async def save(self, settings: AttendanceSettings) -> None:
        async with db_session(self._db) as conn:
            await execute(
                conn,
                """
                INSERT INTO attendance_settings (
                    business_id, late_threshold_minutes, overtime_threshold_minutes, geo_fencing_enabled,
                    geo_fence_radius, face_verification_enabled, auto_checkout_enabled, auto_checkout_time, allow_wfh
                )
                VALUES (:bid, :late, :overtime, :geo, :radius, :face, :auto, :auto_time, :wfh)
                ON CONFLICT (business_id) DO UPDATE SET
                    late_threshold_minutes=excluded.late_threshold_minutes,
                    overtime_threshold_minutes=excluded.overtime_threshold_minutes,
                    geo_fencing_enabled=excluded.geo_fencing_enabled,
                    geo_fence_radius=excluded.geo_fence_radius,
                    face_verification_enabled=excluded.face_verification_enabled,
                    auto_checkout_enabled=excluded.auto_checkout_enabled,
                    auto_checkout_time=excluded.auto_checkout_time,
                    allow_wfh=excluded.allow_wfh
                """,
                {
                    "bid": settings.business_id,
                    "late": int(settings.late_threshold_minutes),
                    "overtime": int(settings.overtime_threshold_minutes),
                    "geo": 1 if settings.geo_fencing_enabled else 0,
                    "radius": int(settings.geo_fence_radius),
                    "face": 1 if settings.face_verification_enabled else 0,
                    "auto": 1 if settings.auto_checkout_enabled else 0,
                    "auto_time": settings.auto_checkout_time,
                    "wfh": 1 if settings.allow_wfh else 0,
                },
            )
        self._db.changes.publish("attendance_settings", "upsert", settings.business_id)
