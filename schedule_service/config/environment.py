"""Environment configuration module.

Import this before any other project module that reads environment
variables: it loads the .env file first. It decides which environment
the service runs in, and where the uvicorn entry point listens.

Usage:
    from schedule_service.config.environment import IS_PRODUCTION_ENVIRONMENT, SERVER_PORT

Variables:
    ENVIRONMENT: 'development' (default) or 'production'
    HOST: interface to bind (default 0.0.0.0)
    PORT: port to bind (default 8080)
"""

import os
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# .env values never override variables already set by the platform
load_dotenv()

VALID_ENVIRONMENTS = ('development', 'production')
DEFAULT_PORT = 8080

ENVIRONMENT = os.environ.get('ENVIRONMENT', '').strip().lower()
if ENVIRONMENT not in VALID_ENVIRONMENTS:
    logger.warning(
        f"ENVIRONMENT '{ENVIRONMENT}' is invalid or not set; "
        f"expected one of {VALID_ENVIRONMENTS}. Running as development."
    )
    ENVIRONMENT = 'development'

IS_PRODUCTION_ENVIRONMENT = ENVIRONMENT == 'production'

def _port_from_env() -> int:
    raw = os.environ.get('PORT', '').strip()
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer, got {raw!r}")

SERVER_HOST = os.environ.get('HOST', '0.0.0.0')
SERVER_PORT = _port_from_env()

__all__ = ['ENVIRONMENT', 'IS_PRODUCTION_ENVIRONMENT', 'SERVER_HOST', 'SERVER_PORT']
