"""Plan tier -> capability limits.

Pure data and functions; nothing here touches the store.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from ..core.enums import PlanTier


@dataclass(frozen=True)
class PlanLimits:
    max_staff: int
    has_advanced_analytics: bool = False
    has_full_notifications: bool = False
    has_support_tickets: bool = False
    has_task_allotment: bool = False
    has_documentation: bool = False
    has_advanced_attendance: bool = False
    has_geo_fencing: bool = False
    has_face_verification: bool = False
    has_export_features: bool = False
    has_leaderboards: bool = False
    has_trend_analysis: bool = False
    has_ebitda_calculation: bool = False
    has_pat_calculation: bool = False

    def capabilities(self) -> Dict[str, bool]:
        """Every boolean capability flag by name."""
        return {k: v for k, v in asdict(self).items() if isinstance(v, bool)}


@dataclass(frozen=True)
class PlanFeature:
    feature_id: str
    name: str
    description: str
    category: str
    is_premium_only: bool = True


PLAN_LIMITS: Dict[PlanTier, PlanLimits] = {
    PlanTier.FREE: PlanLimits(max_staff=3),
    PlanTier.PREMIUM: PlanLimits(
        max_staff=30,
        has_advanced_analytics=True,
        has_full_notifications=True,
        has_support_tickets=True,
        has_task_allotment=True,
        has_documentation=True,
        has_advanced_attendance=True,
        has_geo_fencing=True,
        has_face_verification=True,
        has_export_features=True,
        has_leaderboards=True,
        has_trend_analysis=True,
        has_ebitda_calculation=True,
        has_pat_calculation=True,
    ),
}

FEATURE_FLAGS: Dict[str, str] = {
    "advanced-analytics": "has_advanced_analytics",
    "full-notifications": "has_full_notifications",
    "support-tickets": "has_support_tickets",
    "task-allotment": "has_task_allotment",
    "documentation": "has_documentation",
    "advanced-attendance": "has_advanced_attendance",
    "geo-fencing": "has_geo_fencing",
    "face-verification": "has_face_verification",
    "export-features": "has_export_features",
    "leaderboards": "has_leaderboards",
    "trend-analysis": "has_trend_analysis",
    "ebitda-calculation": "has_ebitda_calculation",
    "pat-calculation": "has_pat_calculation",
}

PREMIUM_FEATURES: List[PlanFeature] = [
    PlanFeature("advanced-analytics", "Advanced Analytics", "Gross/net profit, EBITDA and PAT calculations", "analytics"),
    PlanFeature("support-tickets", "Support Ticket System", "Staff raise tickets, owners resolve them", "communication"),
    PlanFeature("task-allotment", "Task Allotment", "Assign tasks with deadlines and progress tracking", "productivity"),
    PlanFeature("documentation", "Documentation Center", "Share files, SOPs and training material", "productivity"),
    PlanFeature(
        "advanced-attendance",
        "Advanced Staff Attendance",
        "Attendance with location, overtime and reports",
        "staff",
    ),
    PlanFeature("full-notifications", "Full Notification System", "In-app notifications with categories", "communication"),
    PlanFeature("leaderboards", "Staff Leaderboards", "Performance rankings and achievements", "staff"),
    PlanFeature("trend-analysis", "Trend Analysis", "Month over month comparison", "analytics"),
    PlanFeature("export-features", "Export to Excel/PDF", "Export reports in multiple formats", "reports"),
    PlanFeature("extended-staff", "Up to 30 Staff Members", "Larger teams with extended staff limits", "staff"),
]

PREMIUM_ANALYTICS_KEYS = (
    "gross_profit",
    "net_profit",
    "ebitda",
    "pat",
    "overtime_cost",
    "leaderboards",
    "trends",
    "export_options",
)

UPGRADE_MESSAGE = (
    "Upgrade to Premium for advanced analytics including gross/net profit, EBITDA, PAT, and trend analysis."
)


def get_plan_limits(plan: PlanTier | str) -> PlanLimits:
    return PLAN_LIMITS[PlanTier(plan)]


def is_feature_available(plan: PlanTier | str, feature_id: str) -> bool:
    """Unknown feature ids are base features, available on every plan."""
    flag = FEATURE_FLAGS.get(feature_id)
    if flag is None:
        return True
    return bool(getattr(get_plan_limits(plan), flag))


def features_by_category(category: str) -> List[PlanFeature]:
    return [f for f in PREMIUM_FEATURES if f.category == category]


def filter_analytics_by_plan(analytics: Dict[str, Any], plan: PlanTier | str) -> Dict[str, Any]:
    """FREE drops premium keys entirely rather than zeroing them."""
    if PlanTier(plan) == PlanTier.FREE:
        basic = {k: v for k, v in analytics.items() if k not in PREMIUM_ANALYTICS_KEYS}
        basic["premium_features_available"] = False
        basic["upgrade_message"] = UPGRADE_MESSAGE
        return basic

    return {**analytics, "premium_features_available": True}
