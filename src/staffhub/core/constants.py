"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE = 1
DEFAULT_ROSTER_LIMIT = 10
MAX_ROSTER_LIMIT = 100

MIN_SALARY_PIN_LENGTH = 4
DEFAULT_PIN_RESET_TTL_MINUTES = 30

STAFF_ID_COUNTER = "staffId"
STAFF_ID_PREFIX = "STF"

# Collections
STAFFS = "staffs"
USERS = "users"
BRANCHES = "branches"
SHIFTS = "shifts"
SHIFT_ASSIGNMENTS = "shift_assignments"
ATTENDANCE_DAYS = "attendance_days"
SALARY_HISTORIES = "salary_histories"
COUNTERS = "counters"
