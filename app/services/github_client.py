"""GitHub REST API client for sending repository dispatch events."""

import httpx
import structlog

from app.errors import MissingCredential, UpstreamRejected, UpstreamUnreachable
from app.schemas.webhooks import OutboundEvent

logger = structlog.get_logger()

GITHUB_API_URL = "https://api.github.com"

_GITHUB_HEADERS_BASE = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


def _auth_headers(token: str, user_agent: str) -> dict[str, str]:
    """Build GitHub API headers with Bearer auth."""
    return {
        **_GITHUB_HEADERS_BASE,
        "Authorization": f"Bearer {token}",
        "User-Agent": user_agent,
    }


def dispatch_url(base_url: str, owner: str, repo: str) -> str:
    return f"{base_url.rstrip('/')}/repos/{owner}/{repo}/dispatches"


async def send_repository_dispatch(
    client: httpx.AsyncClient,
    event: OutboundEvent,
    *,
    token: str,
    owner: str,
    repo: str,
    base_url: str = GITHUB_API_URL,
    user_agent: str,
) -> None:
    """Send *event* as a ``repository_dispatch`` to ``owner/repo``.

    Makes exactly one attempt.

    Args:
        client: httpx async client used for the request.
        event: The dispatch payload, sent as the JSON body.
        token: GitHub token with ``repo`` scope on the target repository.
        owner: Target repository owner (user or organisation).
        repo: Target repository name.
        base_url: API root, overridable for GitHub Enterprise.
        user_agent: Value of the ``User-Agent`` header.

    Raises:
        MissingCredential: If *token* is empty; no request is made.
        UpstreamRejected: On any non-2xx response.
        UpstreamUnreachable: On connection errors and timeouts.
    """
    if not token:
        raise MissingCredential()

    url = dispatch_url(base_url, owner, repo)
    client_payload = event.client_payload
    logger.info(
        "github_dispatch_sending",
        url=url,
        event_type=event.event_type,
        repo_name=client_payload.repository.repo_name,
        environment=client_payload.environment.value,
        tag=client_payload.push_data.tag,
    )

    try:
        resp = await client.post(
            url,
            json=event.model_dump(mode="json"),
            headers=_auth_headers(token, user_agent),
        )
    except httpx.TransportError as exc:
        logger.error("github_dispatch_unreachable", url=url, error=repr(exc))
        raise UpstreamUnreachable(exc) from exc

    if not resp.is_success:
        logger.error("github_dispatch_rejected", status_code=resp.status_code, body=resp.text)
        raise UpstreamRejected(resp.status_code, resp.text)

    logger.info("github_dispatch_sent", status_code=resp.status_code)


async def check_connection(
    client: httpx.AsyncClient,
    *,
    token: str,
    owner: str,
    repo: str,
    base_url: str = GITHUB_API_URL,
    user_agent: str,
) -> bool:
    """Return True when the target repository is reachable with *token*.

    Never raises; failures are logged and reported as False.
    """
    if not token:
        logger.warning("github_connection_check_skipped", reason="missing token")
        return False

    url = f"{base_url.rstrip('/')}/repos/{owner}/{repo}"
    try:
        resp = await client.get(url, headers=_auth_headers(token, user_agent))
    except httpx.HTTPError as exc:
        logger.warning("github_connection_check_error", url=url, error=repr(exc))
        return False

    if not resp.is_success:
        logger.warning("github_connection_check_failed", status_code=resp.status_code)
        return False
    return True
