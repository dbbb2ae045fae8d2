from __future__ import annotations

import asyncio
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.staff_ledger.staff_ledger.database.bootstrap import apply_schema, list_tables
from src.staff_ledger.staff_ledger.database.connection import DBConfig, Database


async def main() -> None:
    settings = importlib.import_module(get_settings_module())
    database = Database(DBConfig(url=settings.DATABASE_URL))
    try:
        await apply_schema(database)
        tables = await list_tables(database)
    finally:
        await database.dispose()
    print(f"OK: Applied schema.sql -> {database.url} (tables={len(tables)})")


if __name__ == "__main__":
    asyncio.run(main())
