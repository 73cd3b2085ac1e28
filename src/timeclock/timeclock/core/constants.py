"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 6

TIME_FORMAT = "%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

REPORT_HEADERS = [
    "Date",
    "Day",
    "Name",
    "Company",
    "Clock In",
    "Lunch Out",
    "End Lunch",
    "Clock Out",
    "Lunch (mins)",
    "Total Hours",
    "Notes",
]

SUMMARY_HEADERS = ["Employee", "Company", "Range Hours", "Days"]

DAY_RECORDS_COLLECTION = "day_records"
USERS_COLLECTION = "users"
