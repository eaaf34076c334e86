from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_positive_minutes
from ..core.constants import DEFAULT_SESSION_MINUTES, MAX_SESSION_MINUTES
from ..core.exceptions import NotFoundError
from ..courses.model import Course
from ..courses.repository import CourseRepository
from .qr_image import render_qr_data_url
from .token import SessionToken, SessionTokenCodec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedSession:
    token: SessionToken
    token_payload: str
    course: Course
    qr_code: Optional[str] = None

    @property
    def expires_at(self) -> datetime:
        return self.token.expires_at

    @property
    def issued_at(self) -> Optional[datetime]:
        return self.token.issued_at


class SessionIssuer:
    """Use case: mint a short-lived, signed check-in token for a course.

    Stateless: issued tokens are not remembered; expiry is the only liveness
    control.
    """

    def __init__(
        self,
        courses: CourseRepository,
        codec: SessionTokenCodec,
        *,
        default_minutes: float = DEFAULT_SESSION_MINUTES,
        max_minutes: float = MAX_SESSION_MINUTES,
        render_image: Optional[Callable[[str], str]] = render_qr_data_url,
    ):
        self._courses = courses
        self._codec = codec
        self._default_minutes = default_minutes
        self._max_minutes = max_minutes
        self._render_image = render_image

    def issue(self, course_id: int, duration_minutes: Any = None, *, now: Optional[datetime] = None) -> IssuedSession:
        minutes = require_positive_minutes(
            self._default_minutes if duration_minutes is None else duration_minutes,
            "durationMinutes",
            maximum=self._max_minutes,
        )

        course = self._courses.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")

        issued_at = now or now_local()
        token = SessionToken(
            course_id=course.course_id,
            course_name=course.name,
            instructor=course.instructor,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(minutes=minutes),
        )
        payload = self._codec.encode(token)
        qr_code = self._render_image(payload) if self._render_image else None

        logger.info(
            "Session token issued for course %s, valid until %s",
            course.course_id,
            token.expires_at.isoformat(timespec="seconds"),
        )
        return IssuedSession(token=token, token_payload=payload, course=course, qr_code=qr_code)
