"""Tests for the Docker Hub -> repository dispatch transformation."""

import pytest
from pydantic import ValidationError

from app.errors import TransformationFailed, UnknownRepository
from app.schemas.webhooks import (
    DockerHubPushData,
    DockerHubRepository,
    Environment,
    InboundEvent,
)
from app.services.service_map import ServiceMap
from app.services.transformer import (
    can_transform,
    create_dispatch_payload,
    transform_payload,
)


def _event(repo_name: str = "estatemanner/est-webapp", tag: str = "v1.0.0") -> InboundEvent:
    return InboundEvent(
        repository=DockerHubRepository(repo_name=repo_name, owner="estatemanner"),
        push_data=DockerHubPushData(tag=tag, pusher="dev"),
    )


def test_transform_production_tag(service_map: ServiceMap) -> None:
    result = transform_payload(_event(), service_map)

    assert result.service == "webapp"
    assert result.environment is Environment.PRODUCTION
    assert result.event.model_dump(mode="json") == {
        "event_type": "docker-hub-webhook",
        "client_payload": {
            "repository": {"repo_name": "estatemanner/est-webapp"},
            "push_data": {"tag": "v1.0.0", "pusher": "dev"},
            "environment": "production",
        },
    }


@pytest.mark.parametrize("tag", ["v1.0.0-stg", "v2.1.3-dev", "latest"])
def test_transform_staging_tags(service_map: ServiceMap, tag: str) -> None:
    result = transform_payload(_event(tag=tag), service_map)

    assert result.environment is Environment.STAGING
    assert result.event.client_payload.push_data.tag == tag


def test_forward_service_name_replaces_repo_name(service_map: ServiceMap) -> None:
    result = transform_payload(
        _event("estatemanner/est-pricing-server"), service_map, forward_service_name=True,
    )

    assert result.event.client_payload.repository.repo_name == "pricing"
    assert result.service == "pricing"


def test_custom_event_type(service_map: ServiceMap) -> None:
    result = transform_payload(_event(), service_map, event_type="deploy")
    assert result.event.event_type == "deploy"


def test_unknown_repository_wrapped_in_transformation_failed(service_map: ServiceMap) -> None:
    with pytest.raises(TransformationFailed) as exc_info:
        transform_payload(_event("someone/else"), service_map)

    assert isinstance(exc_info.value.cause, UnknownRepository)
    assert exc_info.value.__cause__ is exc_info.value.cause
    assert "someone/else" in str(exc_info.value)


def test_create_dispatch_payload_defaults() -> None:
    event = create_dispatch_payload("server", "v3.0.0-dev", "ci", Environment.STAGING)

    assert event.event_type == "docker-hub-webhook"
    assert event.client_payload.repository.repo_name == "server"
    assert event.client_payload.push_data.pusher == "ci"
    assert event.client_payload.environment is Environment.STAGING


def test_outbound_event_is_immutable(service_map: ServiceMap) -> None:
    result = transform_payload(_event(), service_map)

    with pytest.raises(ValidationError):
        result.event.event_type = "changed"  # type: ignore[misc]


def test_can_transform(service_map: ServiceMap) -> None:
    assert can_transform(_event(), service_map)
    assert not can_transform(_event("someone/else"), service_map)
