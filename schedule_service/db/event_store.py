"""Persistence adapter for events.

All SQL touching the ``events`` table lives here. Every call checks a
connection out of the pool, runs a single statement inside a transaction
bounded by the caller's deadline, and returns the connection.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select, text

from .db_core import Database
from .operations import translate_errors
from ..models.event import Event
from ..utils.deadline import Deadline

logger = logging.getLogger(__name__)


class EventStore:
    """Repository for the events table."""

    def __init__(self, database: Database):
        self._database = database

    def insert(self, event: Event, deadline: Deadline) -> None:
        """
        Store one fully populated event.

        Raises:
            ConstraintViolationError: If an event with the same id exists
            StorageTimeoutError: If the deadline passes first
            ConnectionFailureError: If the database cannot be reached
        """
        with translate_errors("insert event"):
            with self._database.session(deadline) as session:
                session.add(event)
                session.flush()
        logger.info(f"Stored event {event.id}")

    def list_all(self, deadline: Deadline) -> List[Event]:
        """Return every event ordered by start time, then creation time, then id."""
        query = select(Event).order_by(Event.start_time, Event.created_at, Event.id)
        with translate_errors("list events"):
            with self._database.session(deadline) as session:
                return list(session.scalars(query).all())

    def find_by_id(self, event_id: uuid.UUID, deadline: Deadline) -> Optional[Event]:
        """Return the event with the given id, or None if there is none."""
        with translate_errors("find event"):
            with self._database.session(deadline) as session:
                return session.get(Event, event_id)

    def ping(self, deadline: Deadline) -> None:
        """Verify connectivity with a trivial statement."""
        with translate_errors("ping"):
            with self._database.session(deadline) as session:
                session.execute(text("SELECT 1"))
