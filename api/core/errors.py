"""
Domain errors shared by every resource.

Each error carries the HTTP status the API layer answers with. They are raised
where the problem is detected and handled once, in `main.py`.
"""

from __future__ import annotations


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmptyUpdateError(AppError):
    status_code = 400

    def __init__(self, message: str = "No data to update.") -> None:
        super().__init__(message)


class UnknownFieldError(AppError):
    status_code = 400

    def __init__(self, field: str) -> None:
        super().__init__(f"Unknown field: {field}")
        self.field = field


class InvalidFilterRangeError(AppError):
    status_code = 400


class DuplicateResourceError(AppError):
    status_code = 409


class NotFoundError(AppError):
    status_code = 404


class AuthorizationError(AppError):
    status_code = 403

    def __init__(self, message: str = "Not allowed.") -> None:
        super().__init__(message)


class AuthenticationRequiredError(AuthorizationError):
    status_code = 401

    def __init__(self, message: str = "Authentication required.") -> None:
        super().__init__(message)


class InvalidCredentialsError(AppError):
    status_code = 401

    def __init__(self, message: str = "Invalid username or password.") -> None:
        super().__init__(message)
