from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.constants import (
    DEFAULT_AUTO_CHECKOUT_TIME,
    DEFAULT_GEO_FENCE_RADIUS_METERS,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_OVERTIME_THRESHOLD_MINUTES,
)


@dataclass(frozen=True)
class AttendanceSettings:
    """Per-business attendance configuration.

    The ledger reads only the two thresholds; the rest belongs to the geofence
    and face verification collaborators.
    """

    business_id: str
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES
    overtime_threshold_minutes: int = DEFAULT_OVERTIME_THRESHOLD_MINUTES
    geo_fencing_enabled: bool = False
    geo_fence_radius: int = DEFAULT_GEO_FENCE_RADIUS_METERS
    face_verification_enabled: bool = False
    auto_checkout_enabled: bool = False
    auto_checkout_time: Optional[str] = DEFAULT_AUTO_CHECKOUT_TIME
    allow_wfh: bool = True


class AttendanceSettingsRepository(Protocol):
    async def get(self, business_id: str) -> Optional[AttendanceSettings]:
        raise NotImplementedError

    async def save(self, settings: AttendanceSettings) -> None:
        raise NotImplementedError


class AttendanceSettingsProvider:
    """Returns stored settings, falling back to configured defaults."""

    def __init__(
        self,
        settings: Optional[AttendanceSettingsRepository] = None,
        *,
        default_late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
        default_overtime_threshold_minutes: int = DEFAULT_OVERTIME_THRESHOLD_MINUTES,
    ):
        self._settings = settings
        self._default_late = int(default_late_threshold_minutes)
        self._default_overtime = int(default_overtime_threshold_minutes)

    def defaults_for(self, business_id: str) -> AttendanceSettings:
        return AttendanceSettings(
            business_id=business_id,
            late_threshold_minutes=self._default_late,
            overtime_threshold_minutes=self._default_overtime,
        )

    async def get_for(self, business_id: str) -> AttendanceSettings:
        if self._settings:
            stored = await self._settings.get(business_id)
            if stored:
                return stored
        return self.defaults_for(business_id)

    async def save(self, settings: AttendanceSettings) -> None:
        if self._settings is None:
            raise RuntimeError("No settings store configured")
        await self._settings.save(settings)
