"""Request logging and recovery for the FastAPI application."""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..services.errors import ServiceError

logger = logging.getLogger(__name__)


def install_middleware(app: FastAPI) -> None:
    """Attach request logging and error rendering to the app."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # Recover from anything the handlers did not map to a status
            logger.exception(f"Unhandled error for {request.method} {request.url.path}")
            response = JSONResponse(status_code=500, content={"error": "internal server error"})
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms"
        )
        return response

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
