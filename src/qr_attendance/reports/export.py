from __future__ import annotations

import csv
import logging
import os
import re
import tempfile
from datetime import date
from typing import IO, Iterable, Iterator, Optional

from ..attendance.model import AttendanceReportRow
from ..core.constants import DATE_FORMAT, TIME_FORMAT

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "Student Name",
    "Student ID",
    "Course",
    "Instructor",
    "Date",
    "Time",
    "Status",
    "Location",
]


def export_filename(course_name: str, on_date: Optional[date]) -> str:
    """`<name>_attendance_<date>.csv`, or `_all` when every day is exported."""
    safe_name = re.sub(r'[\\/"]', "", re.sub(r"\s+", "_", course_name.strip()))
    stamp = on_date.strftime(DATE_FORMAT) if on_date else "all"
    return f"{safe_name}_attendance_{stamp}.csv"


def write_attendance_csv(fh: IO[str], rows: Iterable[AttendanceReportRow]) -> int:
    writer = csv.DictWriter(fh, fieldnames=CSV_COLUMNS)
    writer.writeheader()
    count = 0
    for r in rows:
        writer.writerow(
            {
                "Student Name": r.student_name,
                "Student ID": r.student_number,
                "Course": r.course_name,
                "Instructor": r.instructor,
                "Date": r.attendance_date.strftime(DATE_FORMAT),
                "Time": r.attendance_time.strftime(TIME_FORMAT),
                "Status": r.status.value,
                "Location": r.location,
            }
        )
        count += 1
    return count


class TemporaryExportStream:
    """Chunked reader over a temporary export file.

    The file is removed on `close()`, which the WSGI server calls when the
    response finishes, fails or is abandoned, even if iteration never started.
    """

    def __init__(self, path: str, *, chunk_size: int = 8192):
        self.path = path
        self._chunk_size = chunk_size
        self._closed = False

    def __iter__(self) -> Iterator[bytes]:
        with open(self.path, "rb") as fh:
            while True:
                chunk = fh.read(self._chunk_size)
                if not chunk:
                    break
                yield chunk

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass


def build_export_stream(
    rows: Iterable[AttendanceReportRow],
    *,
    directory: Optional[str] = None,
    chunk_size: int = 8192,
) -> TemporaryExportStream:
    fd, path = tempfile.mkstemp(prefix="attendance_", suffix=".csv", dir=directory)
    try:
        with os.fdopen(fd, "w", newline="", encoding="utf-8-sig") as fh:
            count = write_attendance_csv(fh, rows)
    except BaseException:
        os.remove(path)
        raise

    logger.debug("Wrote %s attendance rows to %s", count, path)
    return TemporaryExportStream(path, chunk_size=chunk_size)
