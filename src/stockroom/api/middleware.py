"""Request middleware: per-request log context and a time budget."""

import asyncio
import uuid

import structlog
from fastapi import FastAPI, Request

from stockroom.api.errors import timeout_response
from stockroom.utils.logging import bind_request_context

logger = structlog.get_logger(__name__)


def install_request_timeout(app: FastAPI, timeout_seconds: float) -> None:
    """Abandon requests that exceed ``timeout_seconds`` with a retryable 503.

    Install after any middleware it should wrap. Route handlers must be plain
    functions so their blocking work runs off the event loop; an abandoned
    handler finishes in its worker thread and its response is discarded.
    """

    @app.middleware("http")
    async def request_timeout_middleware(request: Request, call_next):
        bind_request_context(
            request_id=request.headers.get("X-Request-ID", str(uuid.uuid4())),
            method=request.method,
            path=request.url.path,
        )
        try:
            return await asyncio.wait_for(call_next(request), timeout=timeout_seconds)
        except TimeoutError:
            logger.warning("Request timed out", timeout_seconds=timeout_seconds)
            return timeout_response(timeout_seconds)
