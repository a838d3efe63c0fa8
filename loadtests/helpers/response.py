"""Response error extraction for load test observability.

Parses stockroom API error responses into human-readable messages.
Every error the API returns has the shape
``{"error": kind, "message": text, "details": ...}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message suitable for Locust failure messages."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and "error" in body:
        return f"{body['error']}: {body.get('message', '')}"

    return str(body)[:300]


def is_retryable(response: Response) -> bool:
    """Conflicts and timeouts are expected under contention and may be retried."""
    return response.status_code in (409, 503)
