"""Stockroom Load Testing: Locust entry point.

Discovers all user classes from the scenarios package.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Transfer contention only:
    locust -f loadtests/locustfile.py TransferContentionUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py StockroomUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.stockroom import StockroomUser, TransferContentionUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker and check the service is up when the load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    try:
        health = requests.get(f"{environment.host}/health", timeout=5)
        print(f"[LOADTEST] Health: {health.status_code} {health.text[:200]}")
    except requests.RequestException as e:
        print(f"[LOADTEST] Health check failed: {e}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the inventory summary totals when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    try:
        summary = requests.get(f"{environment.host}/inventory/products/inventory/summary", timeout=30).json()
        print(
            f"[LOADTEST] Products: {summary['total_products']}, units: {summary['total_quantity']}, "
            f"unresolved entries: {summary['unresolved_entries']}\n"
        )
    except (requests.RequestException, KeyError, ValueError) as e:
        print(f"[LOADTEST] Could not fetch inventory summary: {e}\n")
