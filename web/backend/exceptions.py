#!/usr/bin/env python3
"""
Error handlers for the web application.

Domain exceptions live in core.exceptions; this module maps them onto
HTTP responses with a consistent envelope.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import (
    ChoreMatchError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _status_for(exc: ChoreMatchError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, StateConflictError):
        return 409
    if isinstance(exc, ValidationError):
        return 400
    return 500


def _is_development(request: Request) -> bool:
    config = getattr(request.app.state, 'config', None)
    return bool(config and config.web.is_development)


async def service_exception_handler(
    request: Request,
    exc: ChoreMatchError
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"Rejected {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies and parameters as client errors.
    """
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request",
            "details": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
                for err in exc.errors()
            ],
            "type": "ValidationError"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    The exception message is only exposed in development.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    content = {
        "success": False,
        "error": "Internal server error",
        "type": "InternalError"
    }
    if _is_development(request):
        content["detail"] = str(exc)

    return JSONResponse(status_code=500, content=content)
