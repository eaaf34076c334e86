from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student, keyed by the human-assigned student number."""

    student_id: int
    name: str
    student_number: str
    email: str
    enrolled_course_ids: tuple[int, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
