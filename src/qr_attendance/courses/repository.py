from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Course


class CourseRepository(Protocol):
    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Course]:
        """Newest first."""

        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[Course]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        instructor: str,
        schedule: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Course:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
