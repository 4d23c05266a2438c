"""Docker Hub push notification -> GitHub repository dispatch transformation."""

from dataclasses import dataclass

import structlog

from app.errors import TransformationFailed, UnknownRepository
from app.schemas.webhooks import (
    DispatchClientPayload,
    DispatchPushData,
    DispatchRepository,
    Environment,
    InboundEvent,
    OutboundEvent,
)
from app.services.environment import detect_environment
from app.services.service_map import ServiceMap

logger = structlog.get_logger()

DEFAULT_EVENT_TYPE = "docker-hub-webhook"


@dataclass(frozen=True)
class TransformResult:
    """The dispatch payload together with the service it targets."""

    event: OutboundEvent
    service: str

    @property
    def environment(self) -> Environment:
        return self.event.client_payload.environment


def create_dispatch_payload(
    repo_name: str,
    tag: str,
    pusher: str,
    environment: Environment,
    event_type: str = DEFAULT_EVENT_TYPE,
) -> OutboundEvent:
    """Build a repository dispatch payload from its individual parts."""
    return OutboundEvent(
        event_type=event_type,
        client_payload=DispatchClientPayload(
            repository=DispatchRepository(repo_name=repo_name),
            push_data=DispatchPushData(tag=tag, pusher=pusher),
            environment=environment,
        ),
    )


def transform_payload(
    event: InboundEvent,
    service_map: ServiceMap,
    *,
    event_type: str = DEFAULT_EVENT_TYPE,
    forward_service_name: bool = False,
) -> TransformResult:
    """Map the repository, classify the tag and assemble the dispatch payload.

    ``client_payload.repository.repo_name`` carries the Docker Hub repository
    name unless *forward_service_name* is set, in which case it carries the
    mapped service name.

    Raises:
        TransformationFailed: If the repository has no service mapping.
    """
    source_repo = event.repository.repo_name
    try:
        service = service_map.map_to_service(source_repo)
    except UnknownRepository as exc:
        logger.error("payload_transformation_failed", repo_name=source_repo, error=str(exc))
        raise TransformationFailed(exc) from exc

    environment = detect_environment(event.push_data.tag)
    outbound = create_dispatch_payload(
        service if forward_service_name else source_repo,
        event.push_data.tag,
        event.push_data.pusher,
        environment,
        event_type,
    )

    logger.info(
        "payload_transformed",
        original_repo=source_repo,
        mapped_service=service,
        tag=event.push_data.tag,
        detected_environment=environment.value,
        pusher=event.push_data.pusher,
    )
    return TransformResult(event=outbound, service=service)


def can_transform(event: InboundEvent, service_map: ServiceMap) -> bool:
    """Return True when *event* would transform without error."""
    return service_map.is_supported(event.repository.repo_name)
