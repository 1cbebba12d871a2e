"""Application error types.

Every error the services and guards raise is an AppError. A single
exception handler (installed by create_app) turns them into

    {"error": {"message": ..., "status": ...}}

with the matching HTTP status, so route handlers never build error
responses themselves.
"""

from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal Server Error"
    headers: Optional[dict[str, str]] = None

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    default_message = "Bad Request"


class UnauthorizedError(AppError):
    """Raised by every auth guard.

    Callers are not told whether they were anonymous or logged in
    without enough rights; both are a plain 401.
    """

    status_code = 401
    default_message = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not Found"
