"""Health check endpoints for configuration and GitHub connectivity."""

from typing import Annotated

import httpx
from fastapi import APIRouter, Depends

from app.config import Settings, validate_settings
from app.dependencies import get_http_client, get_settings
from app.schemas.health import GitHubHealthResponse, HealthResponse
from app.services.github_client import check_connection

router = APIRouter()

AppSettings = Annotated[Settings, Depends(get_settings)]


@router.get("/healthz", response_model=HealthResponse)
async def healthz(cfg: AppSettings) -> HealthResponse:
    """Report liveness and whether the dispatch configuration is usable.

    Always returns 200; an invalid configuration is reported in the body so
    the process is not restarted for a missing secret.
    """
    configuration = "invalid" if validate_settings(cfg) else "valid"
    return HealthResponse(status="ok", configuration=configuration)


@router.get("/healthz/github", response_model=GitHubHealthResponse)
async def healthz_github(
    cfg: AppSettings,
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> GitHubHealthResponse:
    """Check that the dispatch target repository is reachable with the configured token."""
    connected = await check_connection(
        client,
        token=cfg.github_token,
        owner=cfg.github_owner,
        repo=cfg.github_repo,
        base_url=cfg.github_api_url,
        user_agent=cfg.github_user_agent,
    )
    if connected:
        return GitHubHealthResponse(status="ok", github="connected")
    return GitHubHealthResponse(status="degraded", github="unreachable")
