from __future__ import annotations

from enum import Enum


class PlanTier(str, Enum):
    """Subscription tier of a business."""

    FREE = "FREE"
    PREMIUM = "PREMIUM"


class Role(str, Enum):
    """Roles a staff member can request when joining a business."""

    OWNER = "owner"
    MANAGER = "manager"
    STAFF = "staff"


class WorkLocation(str, Enum):
    ONSITE = "onsite"
    WFH = "wfh"
    FIELD = "field"


class AttendanceStatus(str, Enum):
    """Daily attendance status stored with each record."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EARLY_LEAVE = "early_leave"
    HOLIDAY = "holiday"
    LEAVE = "leave"


class LeaveType(str, Enum):
    SICK = "sick"
    CASUAL = "casual"
    ANNUAL = "annual"
    EMERGENCY = "emergency"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    OTHER = "other"


class LeaveStatus(str, Enum):
    """Leave workflow: PENDING -> APPROVED | REJECTED (terminal)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class StaffRequestStatus(str, Enum):
    """Join-request workflow: PENDING -> ACTIVE | REJECTED."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"


class NotificationType(str, Enum):
    STAFF_CHECKIN = "staff_checkin"
    STAFF_CHECKOUT = "staff_checkout"
    LEAVE_REQUEST = "leave_request"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"
    STAFF_REQUEST = "staff_request"
    STAFF_APPROVED = "staff_approved"
    PLAN_UPGRADE = "plan_upgrade"
