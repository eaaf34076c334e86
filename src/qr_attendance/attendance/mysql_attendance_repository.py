from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateAttendanceError, StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_time
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_REPORT_SELECT = """
    SELECT
        ar.attendance_id, ar.course_id, c.name AS course_name, c.instructor,
        ar.student_id, ar.student_name, ar.student_number,
        ar.attendance_date, ar.attendance_time, ar.location, ar.status, ar.created_at
    FROM attendance_records ar
    JOIN courses c ON c.course_id = ar.course_id
"""


def _to_report_row(r: Dict[str, Any]) -> AttendanceReportRow:
    return AttendanceReportRow(
        attendance_id=int(r["attendance_id"]),
        course_id=int(r["course_id"]),
        course_name=r["course_name"],
        instructor=r["instructor"],
        student_id=int(r["student_id"]),
        student_name=r["student_name"],
        student_number=r["student_number"],
        attendance_date=r["attendance_date"],
        attendance_time=normalize_mysql_time(r["attendance_time"]),
        location=r["location"],
        status=AttendanceStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        # Single conditional insert: the unique index decides, no pre-check.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        course_id, student_id, student_name, student_number,
                        attendance_date, attendance_time, location, status, created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        course_id,
                        student_id,
                        student_name,
                        student_number,
                        attendance_date,
                        attendance_time,
                        location,
                        status.value,
                        created_at,
                    ),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateAttendanceError("Attendance already marked for this session") from e
            raise StorageError("Could not record attendance") from e

        return AttendanceRecord(
            attendance_id=attendance_id,
            course_id=course_id,
            student_id=student_id,
            student_name=student_name,
            student_number=student_number,
            attendance_date=attendance_date,
            attendance_time=attendance_time,
            location=location,
            status=status,
            created_at=created_at,
        )

    def list_report_rows(
        self,
        *,
        course_id: Optional[int] = None,
        on_date: Optional[date] = None,
        newest_first: bool = True,
    ) -> Sequence[AttendanceReportRow]:
        clauses: list[str] = []
        params: list[object] = []

        if course_id is not None:
            clauses.append("ar.course_id=%s")
            params.append(int(course_id))
        if on_date is not None:
            clauses.append("ar.attendance_date=%s")
            params.append(on_date)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        direction = "DESC" if newest_first else "ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_REPORT_SELECT}
                {where}
                ORDER BY ar.attendance_date {direction}, ar.attendance_time {direction}, ar.attendance_id {direction}
                """,
                tuple(params),
            )
            return [_to_report_row(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[AttendanceReportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_REPORT_SELECT}
                ORDER BY ar.created_at DESC, ar.attendance_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_report_row(r) for r in fetchall(cur)]

    def count(self, *, on_date: Optional[date] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if on_date is None:
                cur.execute("SELECT COUNT(*) AS total FROM attendance_records")
            else:
                cur.execute(
                    "SELECT COUNT(*) AS total FROM attendance_records WHERE attendance_date=%s",
                    (on_date,),
                )
            r = fetchone(cur)
            return int(r["total"]) if r else 0
