"""
Custom exceptions for the catalog API domain.

These exceptions represent domain-level errors and are independent
of infrastructure concerns. The HTTP layer translates them into the
uniform error body.
"""

from typing import Any, Dict, List, Optional


class CleanApiException(Exception):
    """Base exception for all catalog API errors."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class BadRequestError(CleanApiException):
    """Raised when a command or request payload fails validation."""

    status_code = 400
    error = "Bad Request"

    def __init__(
        self,
        message: str,
        validation_errors: Optional[Dict[str, List[str]]] = None,
    ):
        self.validation_errors = validation_errors
        super().__init__(message=message, details={"validation_errors": validation_errors})


class NotFoundError(CleanApiException):
    """Raised when a requested entity does not exist."""

    status_code = 404
    error = "Not Found"

    def __init__(self, name: str, key: Any = None):
        if key is None:
            message = name
        else:
            message = f"{name} ({key}) was not found"
        super().__init__(message=message, details={"entity": name, "key": key})


class UnauthorizedError(CleanApiException):
    """Raised when the caller is not authenticated."""

    status_code = 401
    error = "Unauthorized"

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message=message)


class ForbiddenError(CleanApiException):
    """Raised when an authenticated caller lacks a required role."""

    status_code = 403
    error = "Forbidden"

    def __init__(self, message: str = "Insufficient permissions", roles: Optional[List[str]] = None):
        super().__init__(message=message, details={"required_roles": roles or []})
