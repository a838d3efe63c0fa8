"""Map domain failures to structured JSON error responses.

Every error body has the shape ``{"error": kind, "message": text,
"details": field messages}``. Protean's own FastAPI handlers are installed
first; the handlers below then take over for the kinds the stockroom
reports distinctly.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import (
    ExpectedVersionError,
    ObjectNotFoundError,
    ValidationError,
)
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from stockroom.config import RETRY_AFTER_SECONDS
from stockroom.errors import InsufficientStockError, InvalidQuantityError

logger = structlog.get_logger(__name__)


def _details(exc):
    messages = getattr(exc, "messages", None)
    return messages if messages else None


def _message(exc, fallback):
    details = _details(exc)
    if isinstance(details, dict):
        parts = []
        for field, errors in details.items():
            text = ", ".join(str(error) for error in errors) if isinstance(errors, list) else str(errors)
            parts.append(text if field.startswith("_") else f"{field}: {text}")
        return "; ".join(parts) or fallback
    return str(exc) or fallback


def error_response(status_code, kind, message, details=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": kind, "message": message, "details": details},
        headers=headers,
    )


def timeout_response(timeout_seconds) -> JSONResponse:
    return error_response(
        503,
        "Timeout",
        f"Request exceeded the {timeout_seconds:g}s time budget; retry later",
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


async def _not_found(request: Request, exc: ObjectNotFoundError):
    return error_response(404, "NotFound", _message(exc, "Record not found"), _details(exc))


async def _validation(request: Request, exc: ValidationError):
    return error_response(400, "ValidationError", _message(exc, "Invalid input"), _details(exc))


async def _request_validation(request: Request, exc: RequestValidationError):
    details = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path"))
        details.setdefault(field or "_request", []).append(error["msg"])
    return error_response(400, "ValidationError", _message(ValidationError(details), "Invalid input"), details)


async def _invalid_quantity(request: Request, exc: InvalidQuantityError):
    return error_response(400, "InvalidQuantity", _message(exc, "Invalid quantity"), _details(exc))


async def _insufficient_stock(request: Request, exc: InsufficientStockError):
    return error_response(409, "InsufficientStock", _message(exc, "Insufficient stock"), _details(exc))


async def _conflict(request: Request, exc: ExpectedVersionError):
    logger.warning("Concurrent modification rejected", path=request.url.path, error=type(exc).__name__)
    return error_response(
        409,
        "Conflict",
        "The record was modified concurrently; nothing was committed. Reload and retry.",
        _details(exc),
    )


def register_exception_handlers(app: FastAPI) -> None:
    register_protean_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ValidationError, _validation)
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(InvalidQuantityError, _invalid_quantity)
    app.add_exception_handler(InsufficientStockError, _insufficient_stock)
    app.add_exception_handler(ExpectedVersionError, _conflict)
