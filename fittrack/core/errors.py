"""Exception handlers that turn persistence failures into friendlier API errors."""

from __future__ import annotations

import logging
from enum import Enum

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError

logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    DATABASE = "DATABASE"
    AUTHENTICATION = "AUTHENTICATION"
    VALIDATION = "VALIDATION"
    SYNC = "SYNC"
    UNKNOWN = "UNKNOWN"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


FRIENDLY_MESSAGES = {
    "conflict": "The record conflicts with existing data.",
    "unavailable": "Database service unavailable. Please retry shortly.",
    "unknown": "An unexpected error occurred.",
}


def classify_error(exc: Exception) -> tuple[ErrorCategory, Severity]:
    """Pick a category/severity for logging from the exception type and message."""
    if isinstance(exc, IntegrityError):
        return ErrorCategory.DATABASE, Severity.MEDIUM
    if isinstance(exc, (OperationalError, InterfaceError)):
        return ErrorCategory.DATABASE, Severity.CRITICAL
    message = str(exc).lower()
    if "auth" in message or "permission" in message or "token" in message:
        return ErrorCategory.AUTHENTICATION, Severity.HIGH
    if "validation" in message or "invalid" in message:
        return ErrorCategory.VALIDATION, Severity.LOW
    if "sync" in message:
        return ErrorCategory.SYNC, Severity.MEDIUM
    return ErrorCategory.UNKNOWN, Severity.HIGH


def _log(request: Request, exc: Exception) -> None:
    category, severity = classify_error(exc)
    logger.error(
        "%s %s failed [%s/%s]: %s",
        request.method,
        request.url.path,
        category.value,
        severity.value,
        exc,
        exc_info=severity is Severity.CRITICAL or category is ErrorCategory.UNKNOWN,
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    _log(request, exc)
    return JSONResponse(status_code=409, content={"detail": FRIENDLY_MESSAGES["conflict"]})


async def database_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    _log(request, exc)
    return JSONResponse(status_code=503, content={"detail": FRIENDLY_MESSAGES["unavailable"]})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    _log(request, exc)
    return JSONResponse(status_code=500, content={"detail": FRIENDLY_MESSAGES["unknown"]})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(OperationalError, database_unavailable_handler)
    app.add_exception_handler(InterfaceError, database_unavailable_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
