"""
Application error taxonomy

Every error carries the HTTP status it maps to. The exception handlers in
main.py render all of them as {"error": message}.
"""

from typing import Iterable, Optional


class AppError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldError(AppError):
    """Raised when one or more required fields are absent or blank"""

    status_code = 400

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class InvalidEmailError(AppError):
    status_code = 400

    def __init__(self, message: str = "Invalid email format"):
        super().__init__(message)


class InvalidEnumValueError(AppError):
    """Raised when a value is not one of the enumerated options for a field"""

    status_code = 400

    def __init__(self, field: str, value, allowed: Iterable[str]):
        self.field = field
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Invalid value for {field}: {value!r}. Must be one of: {', '.join(self.allowed)}"
        )


class InvalidStatusError(AppError):
    status_code = 400

    def __init__(self, allowed: Iterable[str]):
        super().__init__(f"Invalid status. Must be one of: {', '.join(allowed)}")


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class AuthenticationError(AppError):
    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class AuthorizationError(AppError):
    status_code = 403

    def __init__(self, message: str = "Not allowed to access this resource"):
        super().__init__(message)


class DatastoreError(AppError):
    """Opaque passthrough of a database failure"""

    status_code = 500

    def __init__(self, message: str, original: Optional[Exception] = None):
        super().__init__(message)
        self.original = original


class WeakPasswordError(AppError):
    status_code = 400

    def __init__(self, message: str = "Password must be at least 8 characters long"):
        super().__init__(message)
