"""Runtime settings read from the environment.

Protean infrastructure (databases, brokers, event store) is configured in
``domain.toml``; this module only holds service-level knobs.
"""

import os


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


# Upper bound for a single HTTP request before it is abandoned with a 503.
REQUEST_TIMEOUT_SECONDS = _float_env("STOCKROOM_REQUEST_TIMEOUT_SECONDS", 30.0)

# Seconds a client is told to wait before retrying a timed-out request.
RETRY_AFTER_SECONDS = _int_env("STOCKROOM_RETRY_AFTER_SECONDS", 5)

# Movement history paging.
DEFAULT_MOVEMENT_LIMIT = _int_env("STOCKROOM_DEFAULT_MOVEMENT_LIMIT", 100)
DEFAULT_STORAGE_OBJECT_MOVEMENT_LIMIT = _int_env("STOCKROOM_DEFAULT_STORAGE_OBJECT_MOVEMENT_LIMIT", 50)
MAX_MOVEMENT_LIMIT = _int_env("STOCKROOM_MAX_MOVEMENT_LIMIT", 1000)

# Hard ceiling on rows fetched from a repository in one query.
QUERY_ROW_LIMIT = _int_env("STOCKROOM_QUERY_ROW_LIMIT", 100_000)


def current_env() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()
