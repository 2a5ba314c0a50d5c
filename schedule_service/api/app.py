"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

# Internal imports
from schedule_service.config.environment import IS_PRODUCTION_ENVIRONMENT # Environment must be imported first
from schedule_service import __version__
from schedule_service.config.timeouts import TimeoutConfig
from schedule_service.db import Database, DatabaseConfig, EventStore
from schedule_service.services.event_service import EventService
from schedule_service.utils.deadline import Deadline
from schedule_service.utils.logging_config import setup_logging
from .middleware import install_middleware
from .routes import events, health

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    database: Optional[Database] = app.state.database
    store: Optional[EventStore] = app.state.event_store
    owns_database = database is None and store is None
    service = None
    try:
        if store is None:
            if database is None:
                database = Database(DatabaseConfig())
            if app.state.create_schema:
                database.ensure_tables_exist()
            store = EventStore(database)

        service = EventService(store, timeouts=app.state.timeouts)
        # No retry: a database that does not answer at startup is fatal
        await service.check_storage(Deadline.after(app.state.timeouts.ping_timeout))
        logger.info("Database connection verified")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        if service is not None:
            service.close()
        if owns_database and database is not None:
            database.dispose()
        raise

    app.state.event_service = service
    yield
    # Shutdown
    service.close()
    if owns_database:
        database.dispose()

def create_application(
    database: Optional[Database] = None,
    event_store: Optional[EventStore] = None,
    timeouts: Optional[TimeoutConfig] = None,
    create_schema: Optional[bool] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Database to serve from; built from the environment at startup if omitted
        event_store: Store to serve from; built on the database if omitted
        timeouts: Request and storage timeouts; read from the environment if omitted
        create_schema: Create the events table at startup (defaults to on outside production)
    """
    app = FastAPI(
        title="Schedule Service API",
        description="API for recording events and listing them in chronological order",
        version=__version__,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )
    app.state.database = database
    app.state.event_store = event_store
    app.state.timeouts = timeouts or TimeoutConfig()
    app.state.create_schema = (not IS_PRODUCTION_ENVIRONMENT) if create_schema is None else create_schema

    install_middleware(app)

    app.include_router(health.router)
    app.include_router(events.router)

    return app

# Create the application instance
app = create_application()
