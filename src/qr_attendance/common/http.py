from __future__ import annotations

import logging
import unicodedata
from datetime import date
from functools import wraps
from typing import Optional
from urllib.parse import quote

from flask import jsonify, request

from ..core.exceptions import (
    DomainError,
    DuplicateAttendanceError,
    ExpiredTokenError,
    MalformedTokenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from .datetime_utils import parse_iso_date
from .validators import require_int

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (ValidationError, 400),
    (MalformedTokenError, 400),
    (ExpiredTokenError, 400),
    (DuplicateAttendanceError, 400),
    (StorageError, 500),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def error_response(error: DomainError):
    status = status_for(error)
    if status >= 500:
        logger.error("Request failed: %s", error, exc_info=error)
        return jsonify({"error": "Internal server error"}), status
    return jsonify({"error": str(error)}), status


def json_errors(view):
    """Map domain errors to JSON responses; nothing escapes as a crash."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unhandled error in %s", request.endpoint)
            return jsonify({"error": "Internal server error"}), 500

    return wrapper


def attachment_options(filename: str) -> dict:
    """Content-Disposition parameters, with an RFC 5987 `filename*` for non-ASCII names."""
    try:
        filename.encode("ascii")
    except UnicodeEncodeError:
        simple = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
        quoted = quote(filename, safe="!#$&+-.^_`|~")
        return {"filename": simple, "filename*": f"UTF-8''{quoted}"}
    return {"filename": filename}


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_date(name: str = "date") -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must use YYYY-MM-DD") from None


def query_int(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value is None or value == "":
        return None
    return require_int(value, name)
