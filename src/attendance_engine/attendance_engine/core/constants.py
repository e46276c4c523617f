"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GRACE_MINUTES = 15
DEFAULT_TOTAL_WORK_HOURS = 8.0
DEFAULT_REQUIRED_HOURS_PER_DAY = 8.0
DEFAULT_LEAVE_DAYS_PER_MONTH = 2

DEFAULT_RECALC_WINDOW_DAYS = 30
DEFAULT_REPORT_MAX_WORKERS = 4

# Flexible schedules: worked/expected percentage band reported as "Half Day".
# Lower bound inclusive, upper bound exclusive.
HALF_DAY_MIN_PERCENT = 40.0
HALF_DAY_MAX_PERCENT = 90.0

# Fixed number of locks serialising writes per (employee, day).
ATTENDANCE_LOCK_STRIPES = 64
