#!/usr/bin/env python3
"""
ChoreMatch API - FastAPI Application

Household task matching: recommendations, batch and manual assignment,
and the assignment lifecycle.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from core.config_loader import AppConfig, configure_logging
from core.exceptions import ChoreMatchError
from database.database import build_engine
from database.init_db import init_db
from .config import get_config
from .dependencies import DatabaseManager
from .exceptions import (
    service_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler
)
from .routers import (
    tasks_router,
    assignments_router,
    users_router
)

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Application config; loaded from config.yaml when omitted.
            Every request is served by a DatabaseManager built from it.
    """
    config = config or get_config()

    app = FastAPI(
        title="ChoreMatch API",
        description="API for matching household tasks to family members",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.config = config
    app.state.db_manager = DatabaseManager(config)

    # Register exception handlers
    app.add_exception_handler(ChoreMatchError, service_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include routers
    app.include_router(tasks_router)
    app.include_router(assignments_router)
    app.include_router(users_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "chorematch-api"}

    return app


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    configure_logging(config.logging)
    init_db(build_engine(config.database))

    logger.info(f"Starting ChoreMatch API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        create_app(config),
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level=config.logging.level.lower()
    )


if __name__ == "__main__":
    main()
