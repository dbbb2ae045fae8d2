from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    async def add(self, shift: Shift) -> None:
        raise NotImplementedError

    async def update(self, shift: Shift) -> bool:
        raise NotImplementedError

    async def delete(self, shift_id: str) -> bool:
        raise NotImplementedError

    async def get_by_id(self, shift_id: str) -> Optional[Shift]:
        raise NotImplementedError

    async def list_for_business(self, business_id: str) -> Sequence[Shift]:
        raise NotImplementedError

    # Staff default shift
    async def assign(self, *, business_id: str, staff_id: str, shift_id: str) -> None:
        raise NotImplementedError

    async def unassign(self, *, business_id: str, staff_id: str) -> bool:
        raise NotImplementedError

    async def get_assigned_shift_id(self, *, business_id: str, staff_id: str) -> Optional[str]:
        raise NotImplementedError
