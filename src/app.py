"""Stockroom FastAPI application.

Web server for the product-location inventory ledger. Commands are processed
synchronously within the request, each inside its own unit of work.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay in domain.toml:
#   - unset / "test"  → in-memory database, inline broker
#   - "production"    → PostgreSQL, Redis, Message DB
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from stockroom.api.errors import register_exception_handlers
from stockroom.api.middleware import install_request_timeout
from stockroom.config import REQUEST_TIMEOUT_SECONDS
from stockroom.domain import stockroom
from stockroom.utils.logging import configure_logging

configure_logging()
stockroom.init()

_DOMAIN_PREFIX = "/inventory"


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Stockroom API",
    description="Locations, storage types, storage objects and audited product stock movements",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the stockroom domain context for ledger and registry requests."""
    if request.url.path.startswith(_DOMAIN_PREFIX):
        with stockroom.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# Registered last so it wraps the domain context middleware.
install_request_timeout(app, REQUEST_TIMEOUT_SECONDS)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from stockroom.api import (  # noqa: E402
    location_router,
    product_router,
    storage_object_router,
    storage_type_router,
)

app.include_router(location_router)
app.include_router(storage_type_router)
app.include_router(storage_object_router)
app.include_router(product_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"stockroom": {"name": stockroom.name}},
        }
    )
