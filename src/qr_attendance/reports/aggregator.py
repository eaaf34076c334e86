"""Pure aggregation over already-fetched attendance rows.

No I/O here; callers load rows through the attendance repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..attendance.model import AttendanceReportRow
from ..common.datetime_utils import percentage
from ..core.enums import AttendanceStatus


@dataclass
class CourseAttendanceSummary:
    course_id: int
    course_name: str
    date: Optional[date]
    records: List[AttendanceReportRow] = field(default_factory=list)
    total_students: int = 0
    present_count: int = 0
    absent_count: int = 0
    attendance_percentage: int = 0


@dataclass
class StudentAttendanceSummary:
    student_id: int
    student_name: str
    student_number: str
    present_count: int = 0
    total_count: int = 0
    percentage: int = 0


def aggregate_by_course(rows: Iterable[AttendanceReportRow]) -> Dict[int, CourseAttendanceSummary]:
    grouped: Dict[int, CourseAttendanceSummary] = {}

    for r in rows:
        summary = grouped.get(r.course_id)
        if summary is None:
            summary = CourseAttendanceSummary(
                course_id=r.course_id,
                course_name=r.course_name or "Unknown Course",
                date=r.attendance_date,
            )
            grouped[r.course_id] = summary

        summary.records.append(r)
        summary.total_students += 1
        if r.status == AttendanceStatus.PRESENT:
            summary.present_count += 1
        else:
            summary.absent_count += 1

    for summary in grouped.values():
        summary.attendance_percentage = percentage(summary.present_count, summary.total_students)

    return grouped


def aggregate_by_student(rows: Iterable[AttendanceReportRow]) -> List[StudentAttendanceSummary]:
    """Per-student attendance, highest percentage first (stable for ties)."""

    by_student: Dict[int, StudentAttendanceSummary] = {}

    for r in rows:
        s = by_student.get(r.student_id)
        if s is None:
            s = StudentAttendanceSummary(
                student_id=r.student_id,
                student_name=r.student_name,
                student_number=r.student_number,
            )
            by_student[r.student_id] = s

        s.total_count += 1
        if r.status == AttendanceStatus.PRESENT:
            s.present_count += 1

    out = list(by_student.values())
    for s in out:
        s.percentage = percentage(s.present_count, s.total_count)

    out.sort(key=lambda s: s.percentage, reverse=True)
    return out
