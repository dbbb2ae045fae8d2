from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidBusiness(ValidationError):
    """Referenced business id or join-code does not resolve."""


class InvalidDateRange(ValidationError):
    """Leave end date before its start date."""


class AttendanceStateError(DomainError):
    """Base for check-in/check-out state machine violations."""


class AlreadyCheckedIn(AttendanceStateError):
    pass


class AlreadyCheckedOut(AttendanceStateError):
    pass


class NoCheckInFound(AttendanceStateError):
    pass


class NotFound(DomainError):
    """Request id unknown."""


class AlreadyResolved(DomainError):
    """Request already approved or rejected."""


class StaffLimitReached(DomainError):
    """Plan headcount gate tripped.

    Carries the figures the caller needs to render an upgrade prompt.
    """

    def __init__(self, *, current_active_count: int, max_allowed: int, plan: Optional[str] = None):
        self.current_active_count = int(current_active_count)
        self.max_allowed = int(max_allowed)
        self.plan = plan
        label = f"{plan} plan" if plan else "current plan"
        super().__init__(
            f"Staff limit reached for {label} ({self.current_active_count}/{self.max_allowed}). "
            "Upgrade to Premium for up to 30 staff members."
        )


class StorageFailure(Exception):
    """The local store rejected an operation. Always fatal to the call."""


class DuplicateRecord(StorageFailure):
    """A write violated a unique key in the store."""
