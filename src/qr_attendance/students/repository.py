from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Student storage. `student_number` is unique at the storage level."""

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_number(self, student_number: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        student_number: str,
        email: str,
        enrolled_course_ids: Sequence[int] = (),
    ) -> Student:
        """Raises DuplicateStudentError when the number is taken."""

        raise NotImplementedError

    def get_or_create(self, *, name: str, student_number: str, email: str) -> tuple[Student, bool]:
        """Atomic insert-or-fetch keyed on student_number.

        Returns (student, created).
        """

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
