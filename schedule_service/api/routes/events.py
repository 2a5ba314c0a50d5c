"""Events router module."""

import json
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from ..dependencies import get_event_service, request_deadline, run_until_disconnect
from ...services.errors import ValidationError
from ...services.event_service import EventService
from ...utils.deadline import Deadline

router = APIRouter(tags=["events"])

async def _read_json(request: Request) -> Any:
    body = await request.body()
    if not body:
        raise ValidationError("invalid JSON payload: empty body")
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"invalid JSON payload: {e}")

@router.post("/events", status_code=201, response_model=Dict[str, str])
async def create_event(
    request: Request,
    service: EventService = Depends(get_event_service),
    deadline: Deadline = Depends(request_deadline),
):
    """Create an event and return its identifier."""
    payload = await _read_json(request)
    event_id = await run_until_disconnect(request, service.create_event(payload, deadline))
    return {"id": str(event_id)}

@router.get("/events", response_model=List[Dict[str, Any]])
async def list_events(
    request: Request,
    service: EventService = Depends(get_event_service),
    deadline: Deadline = Depends(request_deadline),
):
    """Get all events ordered by start time."""
    return await run_until_disconnect(request, service.list_events(deadline))

@router.get("/events/{event_id}", response_model=Dict[str, Any])
async def get_event(
    event_id: str,
    request: Request,
    service: EventService = Depends(get_event_service),
    deadline: Deadline = Depends(request_deadline),
):
    """Get a single event by ID."""
    return await run_until_disconnect(request, service.find_event(event_id, deadline))
