from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..common.validators import optional_text, require_int, require_non_empty
from ..core.constants import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PLACEHOLDER_EMAIL_DOMAIN,
    STUDENT_NUMBER_MAX_LENGTH,
)
from ..core.exceptions import NotFoundError
from ..courses.repository import CourseRepository
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def placeholder_email(student_number: str) -> str:
    return f"{student_number}@{PLACEHOLDER_EMAIL_DOMAIN}"


class StudentService:
    """Use cases: explicit (administrative) student management."""

    def __init__(self, students: StudentRepository, courses: CourseRepository):
        self._students = students
        self._courses = courses

    def create(
        self,
        *,
        name: Optional[str],
        student_number: Optional[str],
        email: Optional[str] = None,
        enrolled_course_ids: Optional[Iterable] = None,
    ) -> Student:
        name = require_non_empty(name, "name", max_length=NAME_MAX_LENGTH)
        student_number = require_non_empty(student_number, "studentId", max_length=STUDENT_NUMBER_MAX_LENGTH)

        course_ids: list[int] = []
        for raw in enrolled_course_ids or ():
            course_id = require_int(raw, "enrolledCourses")
            if not self._courses.get_by_id(course_id):
                raise NotFoundError(f"Course {course_id} not found")
            if course_id not in course_ids:
                course_ids.append(course_id)

        student = self._students.create(
            name=name,
            student_number=student_number,
            email=optional_text(email, "email", max_length=EMAIL_MAX_LENGTH) or placeholder_email(student_number),
            enrolled_course_ids=course_ids,
        )
        logger.info("Student %s registered (internal id %s)", student.student_number, student.student_id)
        return student

    def list_all(self) -> Sequence[Student]:
        return self._students.list_all()

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student
