"""BB Brewery storefront FastAPI application.

Commands are processed synchronously per request; every request runs inside
the brewery domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from brewery.domain import brewery
from brewery.errors import UpstreamFailure
from brewery.utils.logging import bind_request_context, clear_request_context

# PROTEAN_ENV selects the config overlay in brewery/domain.toml:
#   - unset or "development" -> in-memory provider
#   - "production"           -> PostgreSQL (DATABASE_URL)
brewery.init()

logger = structlog.get_logger(__name__)

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:4200",
    "http://localhost:5173",
)


def cors_origins() -> list[str]:
    configured = os.getenv("BREWERY_CORS_ORIGINS")
    if configured:
        return [origin.strip() for origin in configured.split(",") if origin.strip()]
    return list(DEFAULT_CORS_ORIGINS)


app = FastAPI(
    title="BB Brewery API",
    description="Storefront backend: shoppers, products, baskets, tax and shipping",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the brewery domain context and tag log lines with a request id."""
    bind_request_context(request_id=request.headers.get("x-request-id", uuid.uuid4().hex), path=request.url.path)
    try:
        with brewery.domain_context():
            return await call_next(request)
    finally:
        clear_request_context()


register_exception_handlers(app)


@app.exception_handler(UpstreamFailure)
async def upstream_failure_handler(request: Request, exc: UpstreamFailure):
    logger.error("Upstream failure", operation=exc.operation, error=str(exc.cause))
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


from brewery.api import ROUTERS  # noqa: E402

for router in ROUTERS:
    app.include_router(router)


@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": brewery.name})
