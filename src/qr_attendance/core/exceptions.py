class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or a required field is missing."""


class NotFoundError(DomainError):
    """Raised when a course or student cannot be resolved."""


class MalformedTokenError(DomainError):
    """Raised when a session token cannot be decoded or was not issued by us."""


class ExpiredTokenError(DomainError):
    """Raised when a session token is past its expiry."""


class DuplicateAttendanceError(DomainError):
    """Raised when attendance already exists for the student, course and day."""


class StorageError(DomainError):
    """Raised when the database fails; details are logged, never returned."""


class DuplicateStudentError(ValidationError):
    """Raised when a student number is already registered."""
