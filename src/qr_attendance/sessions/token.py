from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from jose import JWTError, jwt

from ..common.datetime_utils import parse_iso_datetime
from ..core.exceptions import MalformedTokenError


@dataclass(frozen=True)
class SessionToken:
    """Ephemeral session descriptor shown to students as a QR code.

    Never persisted; the server trusts a token only through its signature
    and its expiry.
    """

    course_id: int
    expires_at: datetime
    issued_at: Optional[datetime] = None
    course_name: str = ""
    instructor: str = ""

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class SessionTokenCodec:
    """Encode/decode session tokens as compact HS256-signed JWS strings."""

    def __init__(self, secret_key: str, *, algorithm: str = "HS256"):
        if not secret_key:
            raise ValueError("secret_key is required to sign session tokens")
        self._secret_key = secret_key
        self._algorithm = algorithm

    def encode(self, token: SessionToken) -> str:
        claims: dict[str, Any] = {
            "courseId": token.course_id,
            "courseName": token.course_name,
            "instructor": token.instructor,
            "expiresAt": token.expires_at.isoformat(),
        }
        if token.issued_at is not None:
            claims["issuedAt"] = token.issued_at.isoformat()
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def decode(self, payload: Any) -> SessionToken:
        if not isinstance(payload, str) or not payload.strip():
            raise MalformedTokenError("Invalid QR code data")

        try:
            claims = jwt.decode(payload.strip(), self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            raise MalformedTokenError("Invalid QR code data") from e

        if not isinstance(claims, dict):
            raise MalformedTokenError("Invalid QR code data")

        course_id = claims.get("courseId")
        expires_raw = claims.get("expiresAt")
        if course_id is None or expires_raw is None or isinstance(course_id, bool):
            raise MalformedTokenError("Invalid QR code data")

        try:
            issued_raw = claims.get("issuedAt")
            return SessionToken(
                course_id=int(course_id),
                expires_at=parse_iso_datetime(str(expires_raw)),
                issued_at=parse_iso_datetime(str(issued_raw)) if issued_raw else None,
                course_name=str(claims.get("courseName") or ""),
                instructor=str(claims.get("instructor") or ""),
            )
        except (TypeError, ValueError) as e:
            raise MalformedTokenError("Invalid QR code data") from e
