"""Service layer initialization."""

from .errors import ServiceError, ValidationError, NotFoundError, InternalServiceError
from .event_service import EventService

__all__ = [
    'EventService',
    'ServiceError',
    'ValidationError',
    'NotFoundError',
    'InternalServiceError',
]
