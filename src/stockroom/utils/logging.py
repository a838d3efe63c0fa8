"""Logging for the stockroom service.

Records flow through the standard library root logger, which fans out to the
console and two size-rotated files under ``STOCKROOM_LOG_DIR``. structlog
builds the records: JSON lines in production and staging, a coloured
console with Rich tracebacks everywhere else.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

from stockroom.config import current_env

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVS = {"production", "staging"}

# Chatty third-party loggers held at WARNING regardless of LOG_LEVEL.
_QUIET_LOGGERS = ("uvicorn.access", "asyncio", "sqlalchemy.engine", "protean.server")

_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_BACKUPS = 5


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(current_env(), "INFO")).upper()


def _log_dir(log_dir) -> Path:
    path = Path(log_dir or os.getenv("STOCKROOM_LOG_DIR", "logs"))
    path.mkdir(parents=True, exist_ok=True)
    return path


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def _handlers(log_dir: Path, level: str) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    return [
        console,
        _rotating_file(log_dir / "stockroom.log", level),
        _rotating_file(log_dir / "stockroom_error.log", logging.ERROR),
    ]


def _renderer():
    if current_env() in _JSON_ENVS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
    )


def _processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
        _renderer(),
    ]


def configure_logging(log_dir=None) -> None:
    """Route stdlib logging and configure structlog for the active environment."""
    level = get_log_level()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = _handlers(_log_dir(log_dir), level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(**values) -> None:
    """Replace the per-request log context with ``values``."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)
