from __future__ import annotations

from datetime import datetime

import pytest

from src.staff_ledger.staff_ledger.businesses.model import NewBusiness
from src.staff_ledger.staff_ledger.container import build_container
from src.staff_ledger.staff_ledger.database.bootstrap import apply_schema

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class RecordingSink:
    def __init__(self):
        self.events = []

    async def notify(self, event):
        self.events.append(event)


class FailingSink:
    async def notify(self, event):
        raise RuntimeError("push service unavailable")


@pytest.fixture
def fixed_now():
    # Monday
    return datetime(2024, 3, 4, 8, 0)


@pytest.fixture
def clock(fixed_now):
    return FakeClock(fixed_now)


@pytest.fixture
async def container(clock):
    c = build_container(database_url=TEST_DATABASE_URL, clock=clock)
    await apply_schema(c.database)
    yield c
    await c.database.dispose()


@pytest.fixture
async def business(container):
    return await container.business_registry.create(NewBusiness(name="Corner Cafe", business_type="food"))


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def failing_sink():
    return FailingSink()
