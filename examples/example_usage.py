"""Example: drive the service layer directly against an in-memory store."""

import asyncio
from datetime import datetime

from src.staff_ledger.staff_ledger.businesses.model import NewBusiness
from src.staff_ledger.staff_ledger.container import build_container
from src.staff_ledger.staff_ledger.core.enums import WorkLocation
from src.staff_ledger.staff_ledger.database.bootstrap import apply_schema


async def main():
    container = build_container(database_url="sqlite+aiosqlite:///:memory:")
    await apply_schema(container.database)

    business = await container.business_registry.create(NewBusiness(name="Corner Cafe", business_type="food"))
    ledger = container.attendance_ledger
    await ledger.check_in(business.business_id, "staff_001", WorkLocation.ONSITE, now=datetime(2024, 3, 4, 9, 10))
    record = await ledger.check_out(business.business_id, "staff_001", now=datetime(2024, 3, 4, 17, 30))
    print(record.working_hours)

    print(await container.report_service.monthly_report(business.business_id, 2024, 3))
    await container.database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
