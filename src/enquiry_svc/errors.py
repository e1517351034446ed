"""Domain errors raised by services and rendered by the API layer.

Each error carries the HTTP status code it maps to; ``app.py`` registers a
single handler for ``EnquiryServiceError`` that renders ``{"detail": message}``.
"""

from __future__ import annotations

from fastapi import status


class EnquiryServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(EnquiryServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(EnquiryServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class AuthorizationError(EnquiryServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(EnquiryServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(EnquiryServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Conflict"


class InvalidAssigneeError(ConflictError):
    default_message = "Invalid assignee"


class LastAdminError(ConflictError):
    default_message = "Cannot remove the last admin user"
