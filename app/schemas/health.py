"""Pydantic response models for the health check endpoints."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for the /healthz endpoint."""

    status: str
    configuration: Literal["valid", "invalid"]


class GitHubHealthResponse(BaseModel):
    """Response model for the /healthz/github endpoint."""

    status: Literal["ok", "degraded"]
    github: Literal["connected", "unreachable"]
