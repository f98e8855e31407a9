"""Domain errors raised by services and mapped to HTTP responses in main."""

from typing import Any


class StorefrontError(Exception):
    """Base class for errors the API reports to the caller."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(StorefrontError):
    """Request is well-formed JSON but violates a business rule."""

    status_code = 400


class InvalidTransition(ValidationFailed):
    """A status change that the lifecycle does not allow."""


class NotFound(StorefrontError):
    status_code = 404


class PermissionDenied(StorefrontError):
    status_code = 403


class Conflict(StorefrontError):
    status_code = 409


class DeliveryFailed(StorefrontError):
    """An email that is the whole point of the request could not be sent."""

    status_code = 502
