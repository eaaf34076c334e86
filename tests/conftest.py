from __future__ import annotations

import threading
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

import pytest

from qr_attendance.attendance.model import AttendanceRecord, AttendanceReportRow
from qr_attendance.container import build_services
from qr_attendance.core.enums import AttendanceStatus
from qr_attendance.core.exceptions import DuplicateAttendanceError, DuplicateStudentError
from qr_attendance.courses.model import Course
from qr_attendance.students.model import Student

SECRET = "test-secret"
BASE_TS = datetime(2026, 1, 1, 8, 0, 0)


class InMemoryCourses:
    def __init__(self):
        self._by_id: dict[int, Course] = {}
        self._id = 0

    def get_by_id(self, course_id: int) -> Optional[Course]:
        return self._by_id.get(course_id)

    def list_all(self) -> Sequence[Course]:
        return sorted(self._by_id.values(), key=lambda c: c.created_at, reverse=True)

    def list_recent(self, limit: int) -> Sequence[Course]:
        return self.list_all()[:limit]

    def create(self, *, name, instructor, schedule=None, description=None) -> Course:
        self._id += 1
        ts = BASE_TS + timedelta(minutes=self._id)
        course = Course(
            course_id=self._id,
            name=name,
            instructor=instructor,
            schedule=schedule,
            description=description,
            created_at=ts,
            updated_at=ts,
        )
        self._by_id[course.course_id] = course
        return course

    def count(self) -> int:
        return len(self._by_id)


class InMemoryStudents:
    """Enforces the unique student_number index like the MySQL table."""

    def __init__(self):
        self._by_id: dict[int, Student] = {}
        self._id = 0
        self._lock = threading.Lock()

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._by_id.get(student_id)

    def get_by_number(self, student_number: str) -> Optional[Student]:
        for s in self._by_id.values():
            if s.student_number == student_number:
                return s
        return None

    def list_all(self) -> Sequence[Student]:
        return sorted(self._by_id.values(), key=lambda s: s.created_at, reverse=True)

    def list_recent(self, limit: int) -> Sequence[Student]:
        return self.list_all()[:limit]

    def _insert(self, *, name, student_number, email, enrolled_course_ids=()) -> Student:
        with self._lock:
            if self.get_by_number(student_number):
                raise DuplicateStudentError(f"Student ID {student_number} already exists")
            self._id += 1
            student = Student(
                student_id=self._id,
                name=name,
                student_number=student_number,
                email=email,
                enrolled_course_ids=tuple(enrolled_course_ids),
                created_at=BASE_TS + timedelta(hours=1, minutes=self._id),
            )
            self._by_id[student.student_id] = student
            return student

    def create(self, *, name, student_number, email, enrolled_course_ids=()) -> Student:
        return self._insert(
            name=name,
            student_number=student_number,
            email=email,
            enrolled_course_ids=enrolled_course_ids,
        )

    def get_or_create(self, *, name, student_number, email) -> tuple[Student, bool]:
        existing = self.get_by_number(student_number)
        if existing:
            return existing, False
        try:
            return self._insert(name=name, student_number=student_number, email=email), True
        except DuplicateStudentError:
            return self.get_by_number(student_number), False

    def count(self) -> int:
        return len(self._by_id)


class InMemoryAttendance:
    """Enforces UNIQUE(course_id, student_id, attendance_date) atomically."""

    def __init__(self, courses: InMemoryCourses):
        self._courses = courses
        self._rows: dict[tuple[int, int, date], AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()

    @property
    def records(self) -> list[AttendanceRecord]:
        return list(self._rows.values())

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
        key = (course_id, student_id, attendance_date)
        with self._lock:
            if key in self._rows:
                raise DuplicateAttendanceError("Attendance already marked for this session")
            self._id += 1
            record = AttendanceRecord(
                attendance_id=self._id,
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
            self._rows[key] = record
            return record

    def _to_row(self, r: AttendanceRecord) -> AttendanceReportRow:
        course = self._courses.get_by_id(r.course_id)
        return AttendanceReportRow(
            attendance_id=r.attendance_id,
            course_id=r.course_id,
            course_name=course.name if course else "",
            instructor=course.instructor if course else "",
            student_id=r.student_id,
            student_name=r.student_name,
            student_number=r.student_number,
            attendance_date=r.attendance_date,
            attendance_time=r.attendance_time,
            location=r.location,
            status=r.status,
            created_at=r.created_at,
        )

    def list_report_rows(self, *, course_id=None, on_date=None, newest_first=True) -> Sequence[AttendanceReportRow]:
        items = [
            r
            for r in self._rows.values()
            if (course_id is None or r.course_id == course_id) and (on_date is None or r.attendance_date == on_date)
        ]
        items.sort(key=lambda r: (r.attendance_date, r.attendance_time, r.attendance_id), reverse=newest_first)
        return [self._to_row(r) for r in items]

    def list_recent(self, limit: int) -> Sequence[AttendanceReportRow]:
        items = sorted(self._rows.values(), key=lambda r: (r.created_at, r.attendance_id), reverse=True)
        return [self._to_row(r) for r in items[:limit]]

    def count(self, *, on_date=None) -> int:
        return sum(1 for r in self._rows.values() if on_date is None or r.attendance_date == on_date)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def courses_repo() -> InMemoryCourses:
    return InMemoryCourses()


@pytest.fixture
def students_repo() -> InMemoryStudents:
    return InMemoryStudents()


@pytest.fixture
def attendance_repo(courses_repo) -> InMemoryAttendance:
    return InMemoryAttendance(courses_repo)


@pytest.fixture
def course(courses_repo) -> Course:
    return courses_repo.create(name="Intro to Databases", instructor="Dr. Okafor", schedule="Mon 09:00")


@pytest.fixture
def container(courses_repo, students_repo, attendance_repo, tmp_path):
    return build_services(
        courses_repo=courses_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        secret_key=SECRET,
        export_dir=str(tmp_path),
        render_image=None,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from qr_attendance.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()
