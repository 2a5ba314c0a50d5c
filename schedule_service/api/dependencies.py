"""Request-scoped dependencies shared by the routers."""

import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import Request

from ..services.errors import ServiceError
from ..services.event_service import EventService
from ..utils.deadline import Deadline

logger = logging.getLogger(__name__)

T = TypeVar('T')

# How often an in-flight request checks whether its client went away
DISCONNECT_POLL_SECONDS = 0.25


class ClientDisconnectedError(ServiceError):
    """The client went away before the response was ready."""
    status_code = 499


def get_event_service(request: Request) -> EventService:
    return request.app.state.event_service


def request_deadline(request: Request) -> Deadline:
    """The deadline every call made on behalf of this request must respect."""
    return Deadline.after(request.app.state.timeouts.request_timeout)


async def run_until_disconnect(request: Request, operation: Awaitable[T]) -> T:
    """
    Await an operation, cancelling it if the client disconnects first.

    Cancellation is best effort: a statement already sent to the database
    may still complete there.
    """
    task = asyncio.ensure_future(operation)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.warning(f"Client disconnected, cancelling {request.method} {request.url.path}")
                task.cancel()
                raise ClientDisconnectedError("client closed request")
    finally:
        if not task.done():
            task.cancel()
