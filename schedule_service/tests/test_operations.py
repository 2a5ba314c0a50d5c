"""Tests for storage error translation and the collision retry."""

import pytest
from sqlalchemy import exc as sa_exc

from schedule_service.db import (
    ConnectionFailureError,
    ConstraintViolationError,
    StorageTimeoutError,
    UnknownStorageError,
    translate_errors,
    with_retry,
)


class CancelledByServer(Exception):
    """Driver error carrying the SQLSTATE of a cancelled statement."""
    sqlstate = '57014'


@pytest.mark.parametrize("raised, expected", [
    (sa_exc.OperationalError("SELECT 1", {}, CancelledByServer("statement timeout")), StorageTimeoutError),
    (sa_exc.OperationalError("SELECT 1", {}, Exception("connection refused")), ConnectionFailureError),
    (sa_exc.TimeoutError("QueuePool limit reached"), StorageTimeoutError),
    (sa_exc.IntegrityError("INSERT", {}, Exception("duplicate key")), ConstraintViolationError),
    (sa_exc.InterfaceError("SELECT 1", {}, Exception("connection already closed")), ConnectionFailureError),
    (RuntimeError("something odd"), UnknownStorageError),
])
def test_translate_errors(raised, expected):
    with pytest.raises(expected) as excinfo:
        with translate_errors("list events"):
            raise raised

    assert excinfo.value.__cause__ is raised
    assert str(excinfo.value).startswith("list events")


def test_translate_errors_passes_adapter_errors_through():
    original = StorageTimeoutError("deadline exceeded")
    with pytest.raises(StorageTimeoutError) as excinfo:
        with translate_errors("ping"):
            raise original
    assert excinfo.value is original


def test_with_retry_calls_again_once():
    calls = []

    @with_retry(max_attempts=2, exceptions=(ConstraintViolationError,))
    def insert():
        calls.append(len(calls))
        if len(calls) == 1:
            raise ConstraintViolationError("duplicate key")
        return "stored"

    assert insert() == "stored"
    assert calls == [0, 1]


def test_with_retry_does_not_retry_other_errors():
    calls = []

    @with_retry(max_attempts=2, exceptions=(ConstraintViolationError,))
    def insert():
        calls.append(1)
        raise ConnectionFailureError("connection refused")

    with pytest.raises(ConnectionFailureError):
        insert()
    assert calls == [1]
