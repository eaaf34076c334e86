from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Course:
    """Domain entity: a course an instructor takes attendance for."""

    course_id: int
    name: str
    instructor: str
    schedule: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
