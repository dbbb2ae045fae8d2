from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import js_weekday, now_local, parse_hhmm
from ..common.validators import require_non_empty, require_non_negative
from ..core.exceptions import NotFound, ValidationError
from .classifier import ShiftClassification, classify
from .model import Shift, ShiftDraft
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftCatalog:
    """CRUD over a business's shifts plus the effective-shift lookup used for lateness."""

    def __init__(self, shifts: ShiftRepository, *, clock: Callable[[], datetime] = now_local):
        self._shifts = shifts
        self._clock = clock

    @staticmethod
    def _build(*, shift_id: str, business_id: str, draft: ShiftDraft, created_at: Optional[datetime]) -> Shift:
        days = frozenset(int(d) for d in draft.days_of_week)
        if any(d < 0 or d > 6 for d in days):
            raise ValidationError("Days of week must be between 0 (Sunday) and 6 (Saturday)")

        shift = Shift(
            shift_id=shift_id,
            business_id=business_id,
            name=require_non_empty(draft.name, "Shift name"),
            start_time=parse_hhmm(draft.start_time),
            end_time=parse_hhmm(draft.end_time),
            break_minutes=require_non_negative(draft.break_minutes, "Break duration"),
            days_of_week=days,
            is_active=bool(draft.is_active),
            created_at=created_at,
        )
        if shift.duration_minutes <= 0:
            raise ValidationError("Shift duration (end - start - break) must be positive")
        return shift

    async def create(self, business_id: str, draft: ShiftDraft) -> Shift:
        shift = self._build(
            shift_id=str(uuid.uuid4()),
            business_id=business_id,
            draft=draft,
            created_at=self._clock(),
        )
        await self._shifts.add(shift)
        logger.info("Shift %s (%s) created for business %s", shift.shift_id, shift.name, business_id)
        return shift

    async def update(self, shift_id: str, draft: ShiftDraft) -> Shift:
        current = await self._shifts.get_by_id(shift_id)
        if not current:
            raise NotFound(f"Shift not found: {shift_id}")

        shift = self._build(
            shift_id=current.shift_id,
            business_id=current.business_id,
            draft=draft,
            created_at=current.created_at,
        )
        await self._shifts.update(shift)
        return shift

    async def delete(self, shift_id: str) -> None:
        if not await self._shifts.delete(shift_id):
            raise NotFound(f"Shift not found: {shift_id}")

    async def get(self, shift_id: str) -> Optional[Shift]:
        return await self._shifts.get_by_id(shift_id)

    async def list_for_business(self, business_id: str) -> Sequence[Shift]:
        return await self._shifts.list_for_business(business_id)

    async def assign(self, *, business_id: str, staff_id: str, shift_id: str) -> None:
        shift = await self._shifts.get_by_id(shift_id)
        if not shift or shift.business_id != business_id:
            raise NotFound(f"Shift not found: {shift_id}")
        await self._shifts.assign(business_id=business_id, staff_id=staff_id, shift_id=shift_id)

    async def unassign(self, *, business_id: str, staff_id: str) -> bool:
        return await self._shifts.unassign(business_id=business_id, staff_id=staff_id)

    async def resolve_for(self, *, business_id: str, staff_id: str, work_date: date) -> Optional[Shift]:
        """Assigned shift when active that weekday, else the earliest active shift running that weekday."""
        weekday = js_weekday(work_date)

        assigned_id = await self._shifts.get_assigned_shift_id(business_id=business_id, staff_id=staff_id)
        if assigned_id:
            assigned = await self._shifts.get_by_id(assigned_id)
            if assigned and assigned.is_active and assigned.runs_on(weekday):
                return assigned

        candidates = [
            s for s in await self._shifts.list_for_business(business_id) if s.is_active and s.runs_on(weekday)
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda s: (s.start_time, s.name))

    @staticmethod
    def classify(check_in_time: datetime, shift: Optional[Shift], *, late_threshold_minutes: int) -> ShiftClassification:
        return classify(check_in_time, shift, late_threshold_minutes=late_threshold_minutes)
