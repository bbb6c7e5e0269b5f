"""
utils/exceptions.py

Application error taxonomy. middlewares/error_handler.py turns these into
the standard ErrorResponse envelope with the matching HTTP status.
"""

from typing import Optional


class AppError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error", status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code


class ValidationError(AppError):
    """A required request field is missing or malformed."""
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthError(AppError):
    """Unauthenticated (401) or forbidden (403) caller."""
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized", status_code: int = 401):
        super().__init__(message, status_code=status_code, code="FORBIDDEN" if status_code == 403 else "UNAUTHORIZED")


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class DispatchError(AppError):
    """Unexpected failure while rendering or recording a notification."""
    status_code = 500
    code = "DISPATCH_FAILED"
