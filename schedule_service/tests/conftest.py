"""Shared fixtures for the schedule service tests."""

import threading

import pytest
from fastapi.testclient import TestClient

from schedule_service.api.app import create_application
from schedule_service.config.timeouts import TimeoutConfig
from schedule_service.db import Database, DatabaseConfig, EventStore


@pytest.fixture
def timeouts():
    return TimeoutConfig(request_timeout=15, store_timeout=5, ping_timeout=5)


@pytest.fixture
def database():
    """In-memory SQLite database with the events table created."""
    db = Database(DatabaseConfig(url="sqlite://"))
    db.ensure_tables_exist()
    yield db
    db.dispose()


@pytest.fixture
def store(database):
    return EventStore(database)


@pytest.fixture
def client(database, timeouts):
    app = create_application(database=database, timeouts=timeouts, create_schema=False)
    with TestClient(app) as test_client:
        yield test_client


class StubStore:
    """
    In-memory stand-in for EventStore.

    Calls listed in ``block`` wait on ``release`` before answering, which
    lets tests simulate a database that stops responding.
    """

    def __init__(self, block=(), insert_errors=(), ping_error=None):
        self.events = []
        self.inserted_ids = []
        self.block = set(block)
        self.release = threading.Event()
        self.insert_errors = list(insert_errors)
        self.ping_error = ping_error

    def _maybe_block(self, name):
        if name in self.block:
            self.release.wait(5)

    def insert(self, event, deadline):
        self._maybe_block('insert')
        self.inserted_ids.append(event.id)
        if self.insert_errors:
            raise self.insert_errors.pop(0)
        self.events.append(event)

    def list_all(self, deadline):
        self._maybe_block('list_all')
        return sorted(self.events, key=lambda e: (e.start_time, e.created_at, e.id))

    def find_by_id(self, event_id, deadline):
        self._maybe_block('find_by_id')
        return next((e for e in self.events if e.id == event_id), None)

    def ping(self, deadline):
        self._maybe_block('ping')
        if self.ping_error is not None:
            raise self.ping_error


@pytest.fixture
def stub_store():
    stub = StubStore()
    yield stub
    stub.release.set()
