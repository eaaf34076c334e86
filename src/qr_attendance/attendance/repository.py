from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    """Attendance storage.

    (course_id, student_id, attendance_date) is unique at the storage level;
    `create` must fail with DuplicateAttendanceError instead of writing a
    second row.
    """

    def create(
        self,
        *,
        course_id: int,
        student_id: int,
        student_name: str,
        student_number: str,
        attendance_date: date,
        attendance_time: time,
        location: str,
        status: AttendanceStatus,
        created_at: datetime,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def list_report_rows(
        self,
        *,
        course_id: Optional[int] = None,
        on_date: Optional[date] = None,
        newest_first: bool = True,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

    def count(self, *, on_date: Optional[date] = None) -> int:
        raise NotImplementedError
