from __future__ import annotations

import asyncio
from datetime import date, datetime

from src.staff_ledger.staff_ledger.businesses.model import NewBusiness
from src.staff_ledger.staff_ledger.core.enums import LeaveStatus, LeaveType, StaffRequestStatus, WorkLocation
from src.staff_ledger.staff_ledger.database.bootstrap import _iter_sql_statements, apply_schema, list_tables


async def test_schema_is_idempotent(container):
    await apply_schema(container.database)

    tables = await list_tables(container.database)
    assert {
        "businesses",
        "attendance_settings",
        "shifts",
        "shift_assignments",
        "attendance_records",
        "leave_requests",
        "staff_requests",
        "notifications",
    } <= set(tables)


def test_statement_splitter_keeps_semicolons_in_strings_and_drops_comments():
    sql = """
    -- leading comment; with semicolon
    CREATE TABLE a (x TEXT DEFAULT 'a;b');
    INSERT INTO a VALUES ('it''s');
    """

    statements = list(_iter_sql_statements(sql))

    assert len(statements) == 2
    assert "'a;b'" in statements[0]
    assert statements[1].startswith("INSERT INTO a")


async def test_change_feed_reports_committed_writes(container):
    seen = []
    unsubscribe = container.database.changes.subscribe(seen.append)

    business = await container.business_registry.create(NewBusiness(name="Cafe", business_type="food"))
    unsubscribe()
    await container.business_registry.create(NewBusiness(name="Later", business_type="food"))

    assert [(e.entity, e.action, e.key) for e in seen] == [("businesses", "insert", business.business_id)]


async def test_failing_listener_does_not_break_writes(container):
    def broken(event):
        raise RuntimeError("listener bug")

    seen = []
    container.database.changes.subscribe(broken)
    container.database.changes.subscribe(seen.append)

    await container.business_registry.create(NewBusiness(name="Cafe", business_type="food"))

    assert len(seen) == 1


async def test_concurrent_writes_across_businesses_are_all_kept(container):
    registry = container.business_registry
    businesses = await asyncio.gather(
        *(registry.create(NewBusiness(name=f"Shop {i}", business_type="retail")) for i in range(4))
    )
    day = date(2024, 3, 4)
    ledger = container.attendance_ledger

    await asyncio.gather(
        *(ledger.check_in(b.business_id, "s1", WorkLocation.ONSITE, now=datetime(2024, 3, 4, 9)) for b in businesses)
    )

    for b in businesses:
        assert await ledger.get_today_for(b.business_id, "s1", today=day) is not None


async def test_concurrent_decisions_are_all_kept(container):
    registry = container.business_registry
    businesses = await asyncio.gather(
        *(registry.create(NewBusiness(name=f"Shop {i}", business_type="retail")) for i in range(4))
    )
    leave_ledger = container.leave_ledger
    staff = container.staff_request_service

    leaves = [
        await leave_ledger.submit(b.business_id, "s1", date(2024, 3, 11), date(2024, 3, 12), LeaveType.ANNUAL)
        for b in businesses
    ]
    joins = [await staff.submit(join_code=b.join_code, staff_id="s2", full_name="Ben") for b in businesses]

    await asyncio.gather(
        *(leave_ledger.approve(r.request_id, "owner") for r in leaves),
        *(staff.approve(r.request_id) for r in joins),
    )

    for r in leaves:
        assert (await leave_ledger.get(r.request_id)).status == LeaveStatus.APPROVED
    for r in joins:
        assert (await container.staff_requests_repo.get_by_id(r.request_id)).status == StaffRequestStatus.ACTIVE
    for b in businesses:
        assert await staff.count_active(b.business_id) == 1
