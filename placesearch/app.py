#  Place Search - FastAPI Application
#
#  Main app setup: lifespan, exception handlers, request tracing, CORS,
#  router includes. Creates the DI container and manages store lifecycle.
#
#  Depends on: config.py, container.py, routes/*.py, exceptions.py
#  Used by:    run.py

import logging
import uuid
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from placesearch.config import CORS_ORIGINS, validate_config
from placesearch.container import Container
from placesearch.exceptions import (
    InvalidRequestError,
    RateLimitExceededError,
    SearchError,
    UpstreamError,
)
from placesearch.logging_config import set_client_id, set_request_id
from placesearch.routes.health import router as health_router
from placesearch.routes.search import router as search_router

logger = logging.getLogger("placesearch.app")

# Create and wire the DI container
container = Container()

UPSTREAM_DEFAULT_STATUS = 502


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle.

    Uses AsyncExitStack so that if any startup step fails, all previously
    initialized resources are cleaned up in reverse order.
    """
    logger.info("Place Search starting...")

    # Validate critical config before anything else
    validate_config()

    store = container.store()
    http_client = container.http_client()
    search = container.search()

    async with AsyncExitStack() as stack:
        # Shared httpx client, closed on shutdown
        stack.push_async_callback(http_client.aclose)

        await store.open()
        stack.push_async_callback(store.close)
        logger.info("Store '%s' ready, serving %s results", store.name, search.mode.value)

        yield

    logger.info("Place Search shutting down")


app = FastAPI(
    title="Place Search",
    version="0.1.0",
    lifespan=lifespan,
)


# Pipeline failures become structured responses; nothing escapes a request
@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(RateLimitExceededError)
async def rate_limit_handler(request: Request, exc: RateLimitExceededError):
    return JSONResponse(
        status_code=429,
        content={"detail": str(exc), "retryAfterSeconds": exc.retry_after_seconds},
        headers={"Retry-After": str(exc.retry_after_seconds)},
    )


@app.exception_handler(UpstreamError)
async def upstream_handler(request: Request, exc: UpstreamError):
    status = exc.status_code
    if status is None or not 400 <= status <= 599:
        status = UPSTREAM_DEFAULT_STATUS
    return JSONResponse(status_code=status, content={"detail": str(exc)})


@app.exception_handler(SearchError)
async def search_error_handler(request: Request, exc: SearchError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Request ID tracing
class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = uuid.uuid4().hex[:12]
        set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            set_request_id(None)
            set_client_id(None)

app.add_middleware(RequestIDMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Client-Id"],
    expose_headers=["X-Cache", "X-Mock-Data", "Retry-After", "X-Request-ID"],
)

app.include_router(health_router, prefix="/api")
app.include_router(search_router, prefix="/api")
