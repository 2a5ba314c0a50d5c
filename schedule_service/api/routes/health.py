"""Health check routes for the FastAPI application."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from schedule_service import __version__
from schedule_service.config.environment import ENVIRONMENT
from schedule_service.db import DatabaseError
from schedule_service.services.event_service import EventService
from schedule_service.utils.deadline import Deadline
from ..dependencies import get_event_service, request_deadline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

@router.get("/health")
async def health_check(
    service: EventService = Depends(get_event_service),
    deadline: Deadline = Depends(request_deadline),
):
    """Health check endpoint; reports unhealthy when the database does not answer."""
    body = {
        "status": "healthy",
        "environment": ENVIRONMENT,
        "version": __version__
    }
    try:
        await service.check_storage(deadline)
    except DatabaseError as e:
        logger.error(f"Health check failed ({e.kind}): {e}")
        body["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=body)
    return body
