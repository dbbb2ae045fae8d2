"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_OVERTIME_THRESHOLD_MINUTES = 30
DEFAULT_GEO_FENCE_RADIUS_METERS = 100
DEFAULT_AUTO_CHECKOUT_TIME = "18:00"

STANDARD_WORKDAY_HOURS = 8
OVERTIME_HOURLY_RATE = 25

JOIN_CODE_LENGTH = 8
JOIN_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

OWNER_RECIPIENT = "owner"
