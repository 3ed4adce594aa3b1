"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_REPORT_DAYS = 14
DEFAULT_NOTIFICATION_LIMIT = 10
MAX_NOTIFICATION_LIMIT = 100

GEOLOCATION_TIMEOUT_SECONDS = 10

INSTANT_LATE_PLACEHOLDER = "[time]"
AUTO_REQUEST_PLACEHOLDER = "[X]"

UNKNOWN_DEPARTMENT = "Unassigned"

MORNING_REMINDER_TITLE = "Attendance reminder"
INSTANT_LATE_TITLE = "Late arrival"
AUTO_REQUEST_TITLE = "Lateness reason required"
ADMIN_ESCALATION_TITLE = "Lateness limit reached"
NEW_REQUEST_TITLE = "New request"
REQUEST_DECIDED_TITLE = "Request decision"
MONTHLY_REPORT_TITLE = "Monthly attendance report"
