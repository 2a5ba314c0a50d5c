"""Main application entry point."""

import os

from schedule_service.config.environment import IS_PRODUCTION_ENVIRONMENT, SERVER_HOST, SERVER_PORT
from schedule_service.api.app import app

if __name__ == "__main__":
    import uvicorn

    if not IS_PRODUCTION_ENVIRONMENT:
        # Development mode - use direct app instance for better debugging
        uvicorn.run(
            app,
            host=SERVER_HOST,
            port=SERVER_PORT,
            log_level="debug"
        )
    else:
        # Production mode - use string reference for proper multi-worker support
        uvicorn.run(
            "schedule_service.api.app:app",  # String reference required for multiple workers
            host=SERVER_HOST,
            port=SERVER_PORT,
            workers=int(os.environ.get('WEB_CONCURRENCY', '4')),
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )
