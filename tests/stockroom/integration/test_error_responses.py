"""Integration tests for error mapping and the request time budget."""

import asyncio
import time

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.exceptions import ExpectedVersionError
from stockroom.api import routes
from stockroom.api.errors import register_exception_handlers
from stockroom.api.middleware import install_request_timeout

pytestmark = pytest.mark.fast


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/stale")
    def stale():
        raise ExpectedVersionError("Wrong expected version: 3 (Stream: entry-1, Stream Version: 4)")

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(1)
        return {"status": "ok"}

    @app.get("/blocking")
    def blocking():
        time.sleep(0.5)
        return {"status": "ok"}

    @app.get("/quick")
    def quick():
        return {"status": "ok"}

    install_request_timeout(app, 0.05)
    return TestClient(app)


@pytest.fixture()
def slow_ledger_client(monkeypatch):
    def slow_summary(location_id=None):
        time.sleep(0.5)
        return {
            "location_id": location_id,
            "items": [],
            "total_products": 0,
            "total_quantity": 0,
            "unresolved_entries": 0,
        }

    monkeypatch.setattr(routes, "inventory_summary", slow_summary)

    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(routes.product_router)
    install_request_timeout(app, 0.05)
    return TestClient(app)


class TestConflictMapping:
    def test_stale_version_is_409_conflict(self, client):
        response = client.get("/stale")
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "Conflict"
        assert "modified concurrently" in body["message"]


class TestRequestTimeout:
    def test_slow_request_is_503_with_retry_after(self, client):
        response = client.get("/slow")
        assert response.status_code == 503
        assert response.json()["error"] == "Timeout"
        assert response.headers["Retry-After"] == "5"

    def test_blocking_handler_is_abandoned(self, client):
        response = client.get("/blocking")
        assert response.status_code == 503
        assert response.headers["Retry-After"] == "5"

    def test_blocking_ledger_read_is_abandoned(self, slow_ledger_client):
        response = slow_ledger_client.get("/inventory/products/inventory/summary")
        assert response.status_code == 503
        assert response.json()["error"] == "Timeout"

    def test_quick_request_passes(self, client):
        assert client.get("/quick").json() == {"status": "ok"}
