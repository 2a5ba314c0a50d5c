"""Database operations and utilities.

This module translates driver and SQLAlchemy failures into the adapter
error kinds, and provides the retry decorator used for identifier
collisions.
"""

import logging
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, TypeVar, cast

from sqlalchemy import exc as sa_exc
from psycopg import errors as pg_errors

from .db_core import (
    DatabaseError,
    ConnectionFailureError,
    ConstraintViolationError,
    StorageTimeoutError,
    UnknownStorageError,
)

logger = logging.getLogger(__name__)

# Type variable for generic return type
T = TypeVar('T')

# SQLSTATE 57014: statement cancelled, e.g. by statement_timeout
_QUERY_CANCELED = '57014'


def _is_query_cancelled(error: sa_exc.DBAPIError) -> bool:
    orig = error.orig
    if isinstance(orig, pg_errors.QueryCanceled):
        return True
    return getattr(orig, 'sqlstate', None) == _QUERY_CANCELED


@contextmanager
def translate_errors(operation: str) -> Generator[None, None, None]:
    """
    Translate storage failures raised inside the block into adapter errors.

    Adapter errors raised inside the block pass through unchanged.

    Args:
        operation: Short description used in log messages and error text
    """
    try:
        yield
    except DatabaseError:
        raise
    except sa_exc.IntegrityError as e:
        raise ConstraintViolationError(f"{operation}: constraint violated: {e.orig}") from e
    except sa_exc.TimeoutError as e:
        # Pool checkout timed out
        raise StorageTimeoutError(f"{operation}: timed out waiting for a connection") from e
    except sa_exc.OperationalError as e:
        if _is_query_cancelled(e):
            raise StorageTimeoutError(f"{operation}: statement cancelled after deadline") from e
        raise ConnectionFailureError(f"{operation}: {e.orig}") from e
    except (sa_exc.InterfaceError, sa_exc.DisconnectionError) as e:
        raise ConnectionFailureError(f"{operation}: {e}") from e
    except Exception as e:
        logger.exception(f"Unexpected storage failure during {operation}")
        raise UnknownStorageError(f"{operation}: {e}") from e


def with_retry(
    max_attempts: int = 2,
    exceptions: tuple = (ConstraintViolationError,)
) -> Callable:
    """
    Decorator that calls the wrapped function again, immediately, when it
    raises one of ``exceptions``, up to ``max_attempts`` calls in total.

    The wrapped function must produce fresh input on every call (e.g. a
    new identifier), otherwise the retry repeats the same failure.

    Example:
        @with_retry(max_attempts=2, exceptions=(ConstraintViolationError,))
        def store_new_event(...):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 1
            while True:
                try:
                    return cast(T, func(*args, **kwargs))
                except exceptions as e:
                    if attempt >= max_attempts:
                        logger.error(f"Final attempt failed for {func.__name__}: {e}")
                        raise
                    logger.warning(
                        f"Attempt {attempt}/{max_attempts} failed for {func.__name__}: {e}. Retrying"
                    )
                    attempt += 1

        return wrapper
    return decorator
