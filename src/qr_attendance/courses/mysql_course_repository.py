from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Course
from .repository import CourseRepository

_COLUMNS = "course_id, name, instructor, schedule, description, created_at, updated_at"


def _to_course(r: Dict[str, Any]) -> Course:
    return Course(
        course_id=int(r["course_id"]),
        name=r["name"],
        instructor=r["instructor"],
        schedule=r.get("schedule"),
        description=r.get("description"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE course_id=%s", (int(course_id),))
            r = fetchone(cur)
            return _to_course(r) if r else None

    def list_all(self) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses ORDER BY created_at DESC, course_id DESC")
            return [_to_course(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM courses ORDER BY created_at DESC, course_id DESC LIMIT %s",
                (int(limit),),
            )
            return [_to_course(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        instructor: str,
        schedule: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Course:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO courses(name, instructor, schedule, description)
                VALUES(%s,%s,%s,%s)
                """,
                (name, instructor, schedule, description),
            )
            course_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE course_id=%s", (course_id,))
            return _to_course(fetchone(cur))

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM courses")
            r = fetchone(cur)
            return int(r["total"]) if r else 0
