from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DEFAULT_LOCATION
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one course on one day.

    Student name and number are captured at check-in time and never re-read
    from the student row.
    """

    attendance_id: int
    course_id: int
    student_id: int
    student_name: str
    student_number: str
    attendance_date: date
    attendance_time: time
    location: str = DEFAULT_LOCATION
    status: AttendanceStatus = AttendanceStatus.PRESENT
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read model for reports/exports: attendance joined with its course."""

    attendance_id: int
    course_id: int
    course_name: str
    instructor: str
    student_id: int
    student_name: str
    student_number: str
    attendance_date: date
    attendance_time: time
    location: str
    status: AttendanceStatus
    created_at: Optional[datetime] = None
