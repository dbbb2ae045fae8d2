from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import from_iso, to_iso
from ..core.enums import PlanTier
from ..database.connection import Database
from ..database.sqlite_base import db_session, execute, fetchall, fetchone
from .model import Business
from .repository import BusinessRepository

_COLUMNS = "business_id, name, business_type, owner_name, owner_email, owner_phone, join_code, plan, created_at"


def _row_to_business(r: Dict[str, Any]) -> Business:
    return Business(
        business_id=r["business_id"],
        name=r["name"],
        business_type=r["business_type"],
        join_code=r["join_code"],
        plan=PlanTier(r["plan"]),
        created_at=from_iso(r["created_at"]),
        owner_name=r.get("owner_name"),
        owner_email=r.get("owner_email"),
        owner_phone=r.get("owner_phone"),
    )


class SQLiteBusinessRepository(BusinessRepository):
    def __init__(self, database: Database):
        self._db = database

    async def add(self, business: Business) -> None:
        async with db_session(self._db) as conn:
            await execute(
                conn,
                f"""
                INSERT INTO businesses ({_COLUMNS})
                VALUES (:business_id, :name, :business_type, :owner_name, :owner_email, :owner_phone,
                        :join_code, :plan, :created_at)
                """,
                {
                    "business_id": business.business_id,
                    "name": business.name,
                    "business_type": business.business_type,
                    "owner_name": business.owner_name,
                    "owner_email": business.owner_email,
                    "owner_phone": business.owner_phone,
                    "join_code": business.join_code,
                    "plan": business.plan.value,
                    "created_at": to_iso(business.created_at),
                },
            )
        self._db.changes.publish("businesses", "insert", business.business_id)

    async def get_by_id(self, business_id: str) -> Optional[Business]:
        async with db_session(self._db) as conn:
            r = await fetchone(conn, f"SELECT {_COLUMNS} FROM businesses WHERE business_id=:id", {"id": business_id})
            return _row_to_business(r) if r else None

    async def get_by_code(self, join_code: str) -> Optional[Business]:
        async with db_session(self._db) as conn:
            r = await fetchone(
                conn,
                f"SELECT {_COLUMNS} FROM businesses WHERE UPPER(join_code)=UPPER(:code)",
                {"code": (join_code or "").strip()},
            )
            return _row_to_business(r) if r else None

    async def set_plan(self, business_id: str, plan: PlanTier) -> bool:
        async with db_session(self._db) as conn:
            result = await execute(
                conn,
                "UPDATE businesses SET plan=:plan WHERE business_id=:id",
                {"plan": plan.value, "id": business_id},
            )
            updated = result.rowcount > 0
        if updated:
            self._db.changes.publish("businesses", "update", business_id)
        return updated

    async def list_all(self) -> Sequence[Business]:
        async with db_session(self._db) as conn:
            rows = await fetchall(conn, f"SELECT {_COLUMNS} FROM businesses ORDER BY created_at")
            return [_row_to_business(r) for r in rows]
