from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_LOCATION, LOCATION_MAX_LENGTH, NAME_MAX_LENGTH, STUDENT_NUMBER_MAX_LENGTH
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateAttendanceError, ExpiredTokenError, NotFoundError
from ..courses.repository import CourseRepository
from ..sessions.token import SessionTokenCodec
from ..students.repository import StudentRepository
from ..students.service import placeholder_email
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class CheckInProcessor:
    """Use case: a student submits a session token plus identity.

    Steps short-circuit in order: decode token, check expiry, validate
    identity, resolve course, find-or-create student, insert attendance.
    Exactly one attendance row is written on success and none on failure.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        courses: CourseRepository,
        codec: SessionTokenCodec,
    ):
        self._attendance = attendance
        self._students = students
        self._courses = courses
        self._codec = codec

    def check_in(
        self,
        token_payload: Any,
        student_name: Optional[str],
        external_student_id: Optional[str],
        location: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()

        token = self._codec.decode(token_payload)
        if token.is_expired(now):
            raise ExpiredTokenError("QR code has expired")

        student_name = require_non_empty(student_name, "studentName", max_length=NAME_MAX_LENGTH)
        student_number = require_non_empty(external_student_id, "studentId", max_length=STUDENT_NUMBER_MAX_LENGTH)
        location = optional_text(location, "location", max_length=LOCATION_MAX_LENGTH) or DEFAULT_LOCATION

        course = self._courses.get_by_id(token.course_id)
        if not course:
            raise NotFoundError("Course not found")

        student, created = self._students.get_or_create(
            name=student_name,
            student_number=student_number,
            email=placeholder_email(student_number),
        )
        if created:
            logger.info("Student %s created on first check-in", student_number)

        try:
            record = self._attendance.create(
                course_id=course.course_id,
                student_id=student.student_id,
                student_name=student_name,
                student_number=student_number,
                attendance_date=now.date(),
                attendance_time=now.time().replace(microsecond=0),
                location=location,
                status=AttendanceStatus.PRESENT,
                created_at=now,
            )
        except DuplicateAttendanceError:
            logger.warning(
                "Duplicate check-in rejected: course=%s student=%s date=%s",
                course.course_id,
                student_number,
                now.date().isoformat(),
            )
            raise

        logger.info("Attendance %s recorded for student %s in course %s", record.attendance_id, student_number, course.course_id)
        return record
