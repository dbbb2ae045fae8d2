from __future__ import annotations

import asyncio
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.staff_ledger.staff_ledger.businesses.model import NewBusiness
from src.staff_ledger.staff_ledger.container import build_container
from src.staff_ledger.staff_ledger.database.bootstrap import apply_schema
from src.staff_ledger.staff_ledger.shifts.model import ShiftDraft

DEMO_JOIN_CODE = "DEMO2024"
DEMO_STAFF = (("staff_001", "Ana Lima"), ("staff_002", "Ben Okafor"))


async def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(database_url=settings.DATABASE_URL)
    try:
        await apply_schema(container.database)

        registry = container.business_registry
        business = await registry.find_by_code(DEMO_JOIN_CODE)
        if business is None:
            business = await registry.create(
                NewBusiness(
                    name="Demo Bakery",
                    business_type="retail",
                    owner_name="Demo Owner",
                    join_code=DEMO_JOIN_CODE,
                )
            )
            await container.shift_catalog.create(
                business.business_id,
                ShiftDraft(name="Morning", start_time="09:00", end_time="17:00", break_minutes=30),
            )
            for staff_id, full_name in DEMO_STAFF:
                request = await container.staff_request_service.submit(
                    join_code=DEMO_JOIN_CODE, staff_id=staff_id, full_name=full_name
                )
                await container.staff_request_service.approve(request.request_id)
    finally:
        await container.database.dispose()

    print(f"OK: Seeded demo business {business.business_id} (join code {business.join_code})")


if __name__ == "__main__":
    asyncio.run(main())
