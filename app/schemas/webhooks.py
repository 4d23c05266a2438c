"""Pydantic models for Docker Hub webhooks and GitHub repository dispatches."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Environment(str, Enum):
    """Deployment target derived from a Docker image tag."""

    PRODUCTION = "production"
    STAGING = "staging"


class DockerHubRepository(BaseModel):
    """Repository section of a Docker Hub push notification."""

    model_config = ConfigDict(frozen=True)

    repo_name: str
    owner: str
    full_name: str | None = None


class DockerHubPushData(BaseModel):
    """Push section of a Docker Hub push notification."""

    model_config = ConfigDict(frozen=True)

    tag: str
    pusher: str
    pushed_at: int | None = None


class InboundEvent(BaseModel):
    """A validated Docker Hub push notification.

    Reference: https://docs.docker.com/docker-hub/repos/manage/webhooks/
    """

    model_config = ConfigDict(frozen=True)

    repository: DockerHubRepository
    push_data: DockerHubPushData
    callback_url: str | None = None


class DispatchRepository(BaseModel):
    model_config = ConfigDict(frozen=True)

    repo_name: str


class DispatchPushData(BaseModel):
    model_config = ConfigDict(frozen=True)

    tag: str
    pusher: str


class DispatchClientPayload(BaseModel):
    """``client_payload`` delivered to the GitHub Actions workflow."""

    model_config = ConfigDict(frozen=True)

    repository: DispatchRepository
    push_data: DispatchPushData
    environment: Environment


class OutboundEvent(BaseModel):
    """GitHub ``repository_dispatch`` request body.

    Reference: https://docs.github.com/en/rest/repos/repos#create-a-repository-dispatch-event
    """

    model_config = ConfigDict(frozen=True)

    event_type: str
    client_payload: DispatchClientPayload


class WebhookSuccessResponse(BaseModel):
    """Response body returned to Docker Hub after a successful dispatch."""

    success: bool = True
    message: str
    service: str
    environment: Environment
    processing_time_ms: int
