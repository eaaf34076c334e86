from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from ..attendance.model import AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local, percentage
from ..core.constants import (
    DATE_FORMAT,
    RECENT_ACTIVITY_LIMIT,
    RECENT_ATTENDANCE_LIMIT,
    RECENT_COURSES_LIMIT,
    RECENT_STUDENTS_LIMIT,
    TIME_FORMAT,
)
from ..core.enums import ActivityType, AttendanceStatus
from ..core.exceptions import NotFoundError
from ..courses.model import Course
from ..courses.repository import CourseRepository
from ..students.repository import StudentRepository
from .aggregator import (
    CourseAttendanceSummary,
    StudentAttendanceSummary,
    aggregate_by_course,
    aggregate_by_student,
)
from .export import TemporaryExportStream, build_export_stream, export_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CsvExport:
    filename: str
    stream: TemporaryExportStream


class ReportService:
    """Read-side use cases: listings, dashboards, session reports, CSV export."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        courses: CourseRepository,
        students: StudentRepository,
        *,
        export_dir: Optional[str] = None,
    ):
        self._attendance = attendance
        self._courses = courses
        self._students = students
        self._export_dir = export_dir

    def _require_course(self, course_id: int) -> Course:
        course = self._courses.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    def list_attendance(self, *, course_id: Optional[int] = None, on_date: Optional[date] = None) -> Sequence[AttendanceReportRow]:
        return self._attendance.list_report_rows(course_id=course_id, on_date=on_date, newest_first=True)

    def course_attendance(self, course_id: int, *, on_date: Optional[date] = None) -> Sequence[AttendanceReportRow]:
        self._require_course(course_id)
        return self._attendance.list_report_rows(course_id=course_id, on_date=on_date, newest_first=False)

    def by_course(self, *, course_id: Optional[int] = None, on_date: Optional[date] = None) -> Dict[int, CourseAttendanceSummary]:
        return aggregate_by_course(self.list_attendance(course_id=course_id, on_date=on_date))

    def by_student(self, *, course_id: Optional[int] = None, on_date: Optional[date] = None) -> List[StudentAttendanceSummary]:
        return aggregate_by_student(self.list_attendance(course_id=course_id, on_date=on_date))

    def session_report(self, course_id: int, *, on_date: Optional[date] = None, now: Optional[datetime] = None) -> dict:
        course = self._require_course(course_id)
        rows = self._attendance.list_report_rows(course_id=course_id, on_date=on_date, newest_first=False)

        total = len(rows)
        present = sum(1 for r in rows if r.status == AttendanceStatus.PRESENT)
        rate = f"{present / total * 100:.1f}%" if total else "0%"
        times = sorted(r.attendance_time.strftime(TIME_FORMAT) for r in rows)
        report_date = on_date or (now or now_local()).date()

        return {
            "course": {
                "name": course.name,
                "instructor": course.instructor,
                "date": report_date.strftime(DATE_FORMAT),
            },
            "statistics": {
                "totalStudents": total,
                "presentStudents": present,
                "absentStudents": total - present,
                "attendanceRate": rate,
                "uniqueStudents": len({r.student_number for r in rows}),
                "firstAttendance": times[0] if times else "N/A",
                "lastAttendance": times[-1] if times else "N/A",
            },
            "attendance": [
                {
                    "studentName": r.student_name,
                    "studentId": r.student_number,
                    "time": r.attendance_time.strftime(TIME_FORMAT),
                    "status": r.status.value,
                    "location": r.location,
                }
                for r in rows
            ],
        }

    def dashboard(self, *, now: Optional[datetime] = None) -> dict:
        today = (now or now_local()).date()
        total_students = self._students.count()
        total_attendance = self._attendance.count()

        return {
            "totalCourses": self._courses.count(),
            "totalStudents": total_students,
            "todayAttendance": self._attendance.count(on_date=today),
            "avgAttendanceRatio": percentage(total_attendance, total_students),
        }

    def recent_activity(self) -> list[dict]:
        activities: list[dict] = []

        for c in self._courses.list_recent(RECENT_COURSES_LIMIT):
            activities.append(
                {
                    "type": ActivityType.COURSE_CREATED.value,
                    "title": "New course added",
                    "description": f"{c.name} by {c.instructor}",
                    "timestamp": c.created_at,
                }
            )

        for s in self._students.list_recent(RECENT_STUDENTS_LIMIT):
            activities.append(
                {
                    "type": ActivityType.STUDENT_ADDED.value,
                    "title": "New student added",
                    "description": f"{s.name} (ID: {s.student_number})",
                    "timestamp": s.created_at,
                }
            )

        for r in self._attendance.list_recent(RECENT_ATTENDANCE_LIMIT):
            activities.append(
                {
                    "type": ActivityType.ATTENDANCE_MARKED.value,
                    "title": "Attendance marked",
                    "description": f"{r.student_name} marked {r.status.value} for {r.course_name}",
                    "timestamp": r.created_at,
                }
            )

        activities.sort(key=lambda a: a["timestamp"] or datetime.min, reverse=True)
        return activities[:RECENT_ACTIVITY_LIMIT]

    def export_csv(self, course_id: int, *, on_date: Optional[date] = None) -> CsvExport:
        course = self._require_course(course_id)
        rows = self._attendance.list_report_rows(course_id=course_id, on_date=on_date, newest_first=False)
        filename = export_filename(course.name, on_date)

        stream = build_export_stream(rows, directory=self._export_dir)
        logger.info("CSV export prepared for course %s (%s rows)", course_id, len(rows))
        return CsvExport(filename=filename, stream=stream)
