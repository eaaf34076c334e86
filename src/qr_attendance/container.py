from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import CheckInProcessor
from .core.constants import DEFAULT_SESSION_MINUTES, MAX_SESSION_MINUTES
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.repository import CourseRepository
from .courses.service import CourseService
from .database.connection import DatabaseConnection
from .reports.service import ReportService
from .sessions.qr_image import render_qr_data_url
from .sessions.service import SessionIssuer
from .sessions.token import SessionTokenCodec
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    courses_repo: CourseRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    token_codec: SessionTokenCodec
    course_service: CourseService
    student_service: StudentService
    session_issuer: SessionIssuer
    check_in_processor: CheckInProcessor
    report_service: ReportService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    courses_repo: CourseRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    secret_key: str,
    token_algorithm: str = "HS256",
    default_session_minutes: float = DEFAULT_SESSION_MINUTES,
    max_session_minutes: float = MAX_SESSION_MINUTES,
    export_dir: Optional[str] = None,
    render_image: Optional[Callable[[str], str]] = render_qr_data_url,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    codec = SessionTokenCodec(secret_key, algorithm=token_algorithm)

    return Container(
        courses_repo=courses_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        token_codec=codec,
        course_service=CourseService(courses_repo),
        student_service=StudentService(students_repo, courses_repo),
        session_issuer=SessionIssuer(
            courses_repo,
            codec,
            default_minutes=default_session_minutes,
            max_minutes=max_session_minutes,
            render_image=render_image,
        ),
        check_in_processor=CheckInProcessor(attendance_repo, students_repo, courses_repo, codec),
        report_service=ReportService(attendance_repo, courses_repo, students_repo, export_dir=export_dir),
        conn=conn,
    )


def build_container(conn: DatabaseConnection, settings) -> Container:
    return build_services(
        courses_repo=MySQLCourseRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        secret_key=getattr(settings, "SECRET_KEY"),
        token_algorithm=getattr(settings, "TOKEN_ALGORITHM", "HS256"),
        default_session_minutes=getattr(settings, "DEFAULT_SESSION_MINUTES", DEFAULT_SESSION_MINUTES),
        max_session_minutes=getattr(settings, "MAX_SESSION_MINUTES", MAX_SESSION_MINUTES),
        export_dir=getattr(settings, "EXPORT_DIR", None),
        conn=conn,
    )
