"""Field-by-field validation of untrusted Docker Hub webhook bodies.

The parsed JSON is treated as an arbitrary value.  Every check runs and all
violations are reported together so the sender sees every problem at once.
"""

from typing import Any

import structlog

from app.errors import ValidationFailed
from app.schemas.webhooks import DockerHubPushData, DockerHubRepository, InboundEvent
from app.services.service_map import ServiceMap

logger = structlog.get_logger()


def _section(candidate: Any, key: str) -> dict[str, Any]:
    """Return ``candidate[key]`` when it is a JSON object, else an empty dict."""
    if not isinstance(candidate, dict):
        return {}
    value = candidate.get(key)
    return value if isinstance(value, dict) else {}


def _check_required_string(
    section: dict[str, Any],
    path: str,
    field: str,
    errors: list[str],
    *,
    allow_empty: bool = False,
) -> None:
    value = section.get(field)
    if value is None or (not allow_empty and value == ""):
        errors.append(f"Missing {path}.{field}")
    elif not isinstance(value, str):
        errors.append(f"{path}.{field} must be a string")


def collect_violations(candidate: Any, service_map: ServiceMap) -> list[str]:
    """Return every problem found in *candidate*; empty when it is valid."""
    errors: list[str] = []
    repository = _section(candidate, "repository")
    push_data = _section(candidate, "push_data")

    _check_required_string(repository, "repository", "repo_name", errors)
    _check_required_string(repository, "repository", "owner", errors)
    _check_required_string(push_data, "push_data", "tag", errors)
    _check_required_string(push_data, "push_data", "pusher", errors, allow_empty=True)

    repo_name = repository.get("repo_name")
    if isinstance(repo_name, str) and repo_name and not service_map.is_supported(repo_name):
        errors.append(
            f"Unsupported repository: {repo_name}. "
            f"Supported: {', '.join(service_map.supported_repositories())}"
        )

    return errors


def validate_payload(candidate: Any, service_map: ServiceMap) -> InboundEvent:
    """Validate *candidate* and build a typed :class:`InboundEvent`.

    Raises:
        ValidationFailed: Carrying every violation found.
    """
    errors = collect_violations(candidate, service_map)
    if errors:
        logger.warning("payload_validation_failed", errors=errors)
        raise ValidationFailed(errors)

    repository = _section(candidate, "repository")
    push_data = _section(candidate, "push_data")
    full_name = repository.get("full_name")
    pushed_at = push_data.get("pushed_at")
    callback_url = candidate.get("callback_url")

    # Optional fields are carried only when they have the expected type.
    return InboundEvent(
        repository=DockerHubRepository(
            repo_name=repository["repo_name"],
            owner=repository["owner"],
            full_name=full_name if isinstance(full_name, str) else None,
        ),
        push_data=DockerHubPushData(
            tag=push_data["tag"],
            pusher=push_data["pusher"],
            pushed_at=pushed_at if isinstance(pushed_at, int) and not isinstance(pushed_at, bool) else None,
        ),
        callback_url=callback_url if isinstance(callback_url, str) else None,
    )


def is_valid_payload(candidate: Any, service_map: ServiceMap) -> bool:
    return not collect_violations(candidate, service_map)
