"""
Error taxonomy shared by the services and the API layer.

Services raise one of the ``ServiceError`` subclasses below instead of
returning sentinel values.  ``main.create_app`` registers a single
exception handler that turns them into ``{"error": message}`` JSON
responses with the status code carried by the exception class, so
route handlers never build error responses themselves.
"""

from fastapi import status


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(ServiceError):
    """Missing or malformed required fields."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class AlreadyRegisteredError(BadRequestError):
    """Signup attempted with an email that already has an account."""

    default_message = "This email is already registered. Please sign in instead."


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalError(ServiceError):
    """Storage or identity capability failure."""
