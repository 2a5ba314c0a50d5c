"""Event service: validation, identity assignment and storage calls."""

import asyncio
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError as PydanticValidationError

from .errors import InternalServiceError, NotFoundError, ValidationError
from .schemas import CreateEventRequest, describe_validation_error
from ..config.timeouts import TimeoutConfig
from ..db import ConstraintViolationError, DatabaseError, EventStore, StorageTimeoutError, with_retry
from ..models.event import Event
from ..utils.deadline import Deadline
from ..utils.timestamps import now_utc

logger = logging.getLogger(__name__)

T = TypeVar('T')


class EventService:
    """
    Creates and reads events through an EventStore.

    Store calls are blocking; each one runs on the service's executor and
    is awaited for no longer than the store timeout, capped by the
    caller's deadline. The service keeps no state between requests.
    """

    def __init__(
        self,
        store: EventStore,
        timeouts: Optional[TimeoutConfig] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        clock: Callable = now_utc,
        id_factory: Callable[[], uuid.UUID] = Event.new_id,
    ):
        self._store = store
        self._timeouts = timeouts or TimeoutConfig()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(thread_name_prefix='event-store')
        self._clock = clock
        self._id_factory = id_factory

    async def create_event(self, payload: Any, deadline: Deadline) -> uuid.UUID:
        """
        Validate a create request and store the event.

        Returns:
            The identifier assigned to the new event

        Raises:
            ValidationError: If the payload is invalid; nothing is stored
            InternalServiceError: If storage fails
        """
        request = self._validate_create(payload)
        try:
            event = await self._call(self._insert_new_event, request, deadline=deadline)
        except DatabaseError as e:
            logger.error(f"insert error ({e.kind}): {e}")
            raise InternalServiceError("could not insert event") from e
        return event.id

    async def list_events(self, deadline: Deadline) -> List[Dict[str, Any]]:
        """Return every event, ordered by start time."""
        try:
            events = await self._call(self._store.list_all, deadline=deadline)
        except DatabaseError as e:
            logger.error(f"select error ({e.kind}): {e}")
            raise InternalServiceError("could not query events") from e
        return [event.to_dict() for event in events]

    async def find_event(self, raw_id: str, deadline: Deadline) -> Dict[str, Any]:
        """
        Return a single event.

        Raises:
            ValidationError: If raw_id is not a canonical UUID
            NotFoundError: If no event has that id
            InternalServiceError: If storage fails
        """
        try:
            event_id = uuid.UUID(raw_id)
        except (ValueError, TypeError):
            raise ValidationError(f"invalid event id '{raw_id}'")
        # Only the canonical hyphenated form is an event id
        if str(event_id) != raw_id.lower():
            raise ValidationError(f"invalid event id '{raw_id}'")

        try:
            event = await self._call(self._store.find_by_id, event_id, deadline=deadline)
        except DatabaseError as e:
            logger.error(f"lookup error ({e.kind}): {e}")
            raise InternalServiceError("could not query event") from e

        if event is None:
            raise NotFoundError("event not found")
        return event.to_dict()

    async def check_storage(self, deadline: Deadline) -> None:
        """Ping the store. Adapter errors propagate unchanged."""
        await self._call(self._store.ping, deadline=deadline)

    def close(self) -> None:
        """Stop the executor without waiting for abandoned store calls."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _validate_create(self, payload: Any) -> CreateEventRequest:
        if not isinstance(payload, dict):
            raise ValidationError("request body must be a JSON object")
        try:
            return CreateEventRequest.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(describe_validation_error(e))

    @with_retry(max_attempts=2, exceptions=(ConstraintViolationError,))
    def _insert_new_event(self, request: CreateEventRequest, deadline: Deadline) -> Event:
        # A fresh id on every attempt; a collision is retried once
        event = Event(
            id=self._id_factory(),
            title=request.title,
            description=request.description,
            start_time=request.start_time,
            end_time=request.end_time,
            created_at=self._clock(),
        )
        self._store.insert(event, deadline)
        return event

    async def _call(self, func: Callable[..., T], *args: Any, deadline: Deadline) -> T:
        """Run a blocking store call under the tighter of the two deadlines."""
        name = getattr(func, '__name__', 'store call')
        call_deadline = deadline.child(self._timeouts.store_timeout)
        if call_deadline.expired:
            raise StorageTimeoutError(f"{name}: deadline exceeded before the call started")

        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self._executor, partial(func, *args, call_deadline))
        try:
            return await asyncio.wait_for(future, timeout=call_deadline.remaining())
        except asyncio.TimeoutError as e:
            raise StorageTimeoutError(
                f"{name}: no response within {self._timeouts.store_timeout}s"
            ) from e
