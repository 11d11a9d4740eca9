"""
Application error taxonomy.

Services raise these; the exception handlers registered in main.py turn
them into a JSON body of the form {"detail": "..."} with the matching
HTTP status code.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class BadRequestError(AppError):
    """Malformed input shape or conflicting data."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class UnauthorizedError(AppError):
    """Missing or invalid credentials or token signature."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class InvalidTokenError(UnauthorizedError):
    """Token signature invalid, token expired or claims missing."""
    default_detail = "Invalid or expired token"


class ForbiddenError(AppError):
    """Valid signature, but the stored session disagrees with the token."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ServerMisconfiguredError(AppError):
    """
    Required configuration (e.g. signing secrets) is missing.

    Fatal for the request, not for the process. The detail given at raise
    time is logged; clients only ever see the default message.
    """
    default_detail = "Server misconfigured"


class InternalError(AppError):
    """Unexpected persistence or crypto failure."""
