from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.constants import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH, SCHEDULE_MAX_LENGTH
from ..core.exceptions import NotFoundError
from .model import Course
from .repository import CourseRepository

logger = logging.getLogger(__name__)


class CourseService:
    """Use cases: create, list and look up courses."""

    def __init__(self, courses: CourseRepository):
        self._courses = courses

    def create(
        self,
        *,
        name: Optional[str],
        instructor: Optional[str],
        schedule: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Course:
        course = self._courses.create(
            name=require_non_empty(name, "name", max_length=NAME_MAX_LENGTH),
            instructor=require_non_empty(instructor, "instructor", max_length=NAME_MAX_LENGTH),
            schedule=optional_text(schedule, "schedule", max_length=SCHEDULE_MAX_LENGTH),
            description=optional_text(description, "description", max_length=DESCRIPTION_MAX_LENGTH),
        )
        logger.info("Course %s created (%s)", course.course_id, course.name)
        return course

    def list_all(self) -> Sequence[Course]:
        return self._courses.list_all()

    def get(self, course_id: int) -> Course:
        course = self._courses.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course
