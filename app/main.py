"""FastAPI application factory with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import VALID_LOG_LEVELS, log_configuration, settings
from app.errors import INTERNAL_ERROR, MethodNotAllowed, error_response
from app.logging_config import configure_logging
from app.routers import health, webhooks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: configure logging and report configuration."""
    log_level = settings.log_level if settings.log_level.lower() in VALID_LOG_LEVELS else "info"
    configure_logging(json_logs=not settings.debug, log_level=log_level)
    log_configuration(settings)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def webhook_method_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Answer unrouted methods on the webhook path with the webhook's own 405 body."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and request.url.path.startswith(
        webhooks.router.prefix
    ):
        return error_response(MethodNotAllowed(request.method), processing_time_ms=0)
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


app.include_router(health.router)
app.include_router(webhooks.router)
