"""Centralized FastAPI dependencies for use with Depends()."""

from collections.abc import AsyncGenerator
from typing import Annotated

import httpx
from fastapi import Depends

from app.config import Settings, settings
from app.services.service_map import ServiceMap


def get_settings() -> Settings:
    """Return the process-wide settings instance.

    Tests override this dependency to supply their own configuration.
    """
    return settings


def get_service_map(cfg: Annotated[Settings, Depends(get_settings)]) -> ServiceMap:
    """Return the repository allow-list and service mapping for *cfg*."""
    return ServiceMap(cfg.service_map)


async def get_http_client(
    cfg: Annotated[Settings, Depends(get_settings)],
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Yield an httpx client for GitHub calls, closed when the request ends."""
    # WEBHOOK_TIMEOUT_MS bounds the dispatch call; httpx would otherwise apply
    # its own 5 s default rather than no timeout at all.
    async with httpx.AsyncClient(timeout=cfg.webhook_timeout_ms / 1000) as client:
        yield client


__all__ = [
    "get_http_client",
    "get_service_map",
    "get_settings",
]
