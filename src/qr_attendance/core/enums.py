from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"


class ActivityType(str, Enum):
    COURSE_CREATED = "course_created"
    STUDENT_ADDED = "student_added"
    ATTENDANCE_MARKED = "attendance_marked"
