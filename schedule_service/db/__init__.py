"""Database package initialization.

This module exposes the public interface of the database package.
"""

from .db_core import (
    Database,
    DatabaseConfig,
    DatabaseError,
    ConnectionFailureError,
    ConstraintViolationError,
    StorageTimeoutError,
    UnknownStorageError,
)
from .event_store import EventStore
from .operations import translate_errors, with_retry

__all__ = [
    # Core database classes
    'Database',
    'DatabaseConfig',
    'EventStore',

    # Exceptions
    'DatabaseError',
    'ConnectionFailureError',
    'ConstraintViolationError',
    'StorageTimeoutError',
    'UnknownStorageError',

    # Utilities
    'translate_errors',
    'with_retry',
]
