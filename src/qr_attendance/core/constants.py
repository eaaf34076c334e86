"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_MINUTES = 5
MAX_SESSION_MINUTES = 240
DEFAULT_LOCATION = "Not provided"
PLACEHOLDER_EMAIL_DOMAIN = "student.local"

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"

RECENT_COURSES_LIMIT = 3
RECENT_STUDENTS_LIMIT = 3
RECENT_ATTENDANCE_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10

# Column widths from database/schema.sql
NAME_MAX_LENGTH = 200
STUDENT_NUMBER_MAX_LENGTH = 64
EMAIL_MAX_LENGTH = 255
LOCATION_MAX_LENGTH = 255
SCHEDULE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 16383
