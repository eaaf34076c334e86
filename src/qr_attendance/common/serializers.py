"""JSON views of domain objects (camelCase, ISO timestamps)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..attendance.model import AttendanceRecord, AttendanceReportRow
from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..courses.model import Course
from ..reports.aggregator import CourseAttendanceSummary, StudentAttendanceSummary
from ..sessions.service import IssuedSession
from ..students.model import Student


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def course_to_json(c: Course) -> dict:
    return {
        "id": c.course_id,
        "name": c.name,
        "instructor": c.instructor,
        "schedule": c.schedule,
        "description": c.description,
        "createdAt": _iso(c.created_at),
        "updatedAt": _iso(c.updated_at),
    }


def student_to_json(s: Student) -> dict:
    return {
        "id": s.student_id,
        "name": s.name,
        "studentId": s.student_number,
        "email": s.email,
        "enrolledCourses": list(s.enrolled_course_ids),
        "createdAt": _iso(s.created_at),
    }


def attendance_to_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "courseId": r.course_id,
        "studentId": r.student_id,
        "studentName": r.student_name,
        "studentIdNumber": r.student_number,
        "date": r.attendance_date.strftime(DATE_FORMAT),
        "time": r.attendance_time.strftime(TIME_FORMAT),
        "location": r.location,
        "status": r.status.value,
        "createdAt": _iso(r.created_at),
    }


def report_row_to_json(r: AttendanceReportRow) -> dict:
    return {
        "id": r.attendance_id,
        "courseId": r.course_id,
        "courseName": r.course_name,
        "instructor": r.instructor,
        "studentId": r.student_id,
        "studentName": r.student_name,
        "studentIdNumber": r.student_number,
        "date": r.attendance_date.strftime(DATE_FORMAT),
        "time": r.attendance_time.strftime(TIME_FORMAT),
        "location": r.location,
        "status": r.status.value,
        "createdAt": _iso(r.created_at),
    }


def course_summary_to_json(s: CourseAttendanceSummary) -> dict:
    return {
        "courseName": s.course_name,
        "date": s.date.strftime(DATE_FORMAT) if s.date else None,
        "records": [report_row_to_json(r) for r in s.records],
        "totalStudents": s.total_students,
        "presentCount": s.present_count,
        "absentCount": s.absent_count,
        "attendancePercentage": s.attendance_percentage,
    }


def student_summary_to_json(s: StudentAttendanceSummary) -> dict:
    return {
        "studentName": s.student_name,
        "studentId": s.student_number,
        "presentCount": s.present_count,
        "totalCount": s.total_count,
        "percentage": s.percentage,
    }


def issued_session_to_json(issued: IssuedSession) -> dict:
    return {
        "tokenPayload": issued.token_payload,
        "course": course_to_json(issued.course),
        "issuedAt": _iso(issued.issued_at),
        "expiresAt": _iso(issued.expires_at),
        "qrCode": issued.qr_code,
    }
