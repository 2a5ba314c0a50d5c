"""Errors raised by the service layer.

Every error carries the message that is safe to show to a client and the
HTTP status the gateway answers with.
"""


class ServiceError(Exception):
    """Base exception for service errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """The request is malformed or fails validation."""
    status_code = 400


class NotFoundError(ServiceError):
    """The identifier is well-formed but no event has it."""
    status_code = 404


class InternalServiceError(ServiceError):
    """Storage failed; the message is generic and the cause is only logged."""
    status_code = 500
