from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector

from ..core.exceptions import DuplicateStudentError, StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)

_COLUMNS = "student_id, name, student_number, email, created_at"


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_enrollments(self, cur, student_ids: List[int]) -> Dict[int, tuple[int, ...]]:
        if not student_ids:
            return {}
        placeholders = ",".join(["%s"] * len(student_ids))
        cur.execute(
            f"""
            SELECT student_id, course_id
            FROM student_courses
            WHERE student_id IN ({placeholders})
            ORDER BY course_id
            """,
            tuple(student_ids),
        )
        out: Dict[int, list[int]] = {}
        for r in fetchall(cur):
            out.setdefault(int(r["student_id"]), []).append(int(r["course_id"]))
        return {k: tuple(v) for k, v in out.items()}

    def _to_students(self, cur, rows: List[Dict[str, Any]]) -> List[Student]:
        enrollments = self._load_enrollments(cur, [int(r["student_id"]) for r in rows])
        return [
            Student(
                student_id=int(r["student_id"]),
                name=r["name"],
                student_number=r["student_number"],
                email=r["email"],
                enrolled_course_ids=enrollments.get(int(r["student_id"]), ()),
                created_at=r.get("created_at"),
            )
            for r in rows
        ]

    def _select_one(self, where: str, params: tuple) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where}", params)
            r = fetchone(cur)
            if not r:
                return None
            return self._to_students(cur, [r])[0]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._select_one("student_id=%s", (int(student_id),))

    def get_by_number(self, student_number: str) -> Optional[Student]:
        return self._select_one("student_number=%s", (student_number,))

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY created_at DESC, student_id DESC")
            return self._to_students(cur, fetchall(cur))

    def list_recent(self, limit: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students ORDER BY created_at DESC, student_id DESC LIMIT %s",
                (int(limit),),
            )
            return self._to_students(cur, fetchall(cur))

    def _insert(self, *, name: str, student_number: str, email: str, enrolled_course_ids: Sequence[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO students(name, student_number, email) VALUES(%s,%s,%s)",
                (name, student_number, email),
            )
            student_id = int(cur.lastrowid)
            for course_id in enrolled_course_ids:
                cur.execute(
                    "INSERT INTO student_courses(student_id, course_id) VALUES(%s,%s)",
                    (student_id, int(course_id)),
                )
            return student_id

    def create(
        self,
        *,
        name: str,
        student_number: str,
        email: str,
        enrolled_course_ids: Sequence[int] = (),
    ) -> Student:
        try:
            student_id = self._insert(
                name=name,
                student_number=student_number,
                email=email,
                enrolled_course_ids=enrolled_course_ids,
            )
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateStudentError(f"Student ID {student_number} already exists") from e
            raise StorageError("Could not create student") from e

        student = self.get_by_id(student_id)
        if student is None:
            raise StorageError("Created student could not be read back")
        return student

    def get_or_create(self, *, name: str, student_number: str, email: str) -> tuple[Student, bool]:
        existing = self.get_by_number(student_number)
        if existing:
            return existing, False

        try:
            student_id = self._insert(name=name, student_number=student_number, email=email, enrolled_course_ids=())
        except mysql.connector.IntegrityError as e:
            if not is_duplicate_key(e):
                raise StorageError("Could not create student") from e
            # Lost the race: another request inserted the same number.
            logger.info("Student %s created concurrently; reusing existing row", student_number)
            existing = self.get_by_number(student_number)
            if existing is None:
                raise StorageError("Student vanished after duplicate-key conflict") from e
            return existing, False

        student = self.get_by_id(student_id)
        if student is None:
            raise StorageError("Created student could not be read back")
        return student, True

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM students")
            r = fetchone(cur)
            return int(r["total"]) if r else 0
