"""QR classroom attendance package.

Organized by feature modules (courses, students, sessions, attendance, reports)
with a thin Flask controller layer over service/repository layers.
"""

__version__ = "1.0.0"
