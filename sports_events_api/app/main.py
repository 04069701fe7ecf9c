"""
Main entrypoint for the Sports Events API.

``create_app`` configures logging, mounts the versioned routers and
registers the startup hook that applies database migrations.  The
module-level ``app`` is what an ASGI server imports::

    uvicorn sports_events_api.app.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from .api.responses import request_validation_failure
from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        A configured application instance.
    """
    # Logging first so the imports and hooks below can log.
    setup_logging(settings)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.add_exception_handler(RequestValidationError, request_validation_failure)
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file on first start and brings the
        # schema up to date.
        init_db()
        logger.info("Database ready")

    return app


app = create_app()
