"""Docker Hub webhook router that re-emits pushes as GitHub repository dispatches."""

import json
import time
from typing import Annotated

import httpx
import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.config import Settings, validate_settings
from app.dependencies import get_http_client, get_service_map, get_settings
from app.errors import (
    ALLOWED_METHODS,
    BridgeError,
    ConfigInvalid,
    MalformedPayload,
    MethodNotAllowed,
    MissingCredential,
    error_response,
)
from app.schemas.webhooks import WebhookSuccessResponse
from app.services.github_client import send_repository_dispatch
from app.services.service_map import ServiceMap
from app.services.transformer import transform_payload
from app.services.validator import validate_payload

logger = structlog.get_logger()

router = APIRouter(prefix="/webhook", tags=["webhooks"])

# Every method is routed here so the gate can answer non-POST requests with
# the webhook's own 405 body instead of the framework default.
_ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def ensure_post(method: str) -> None:
    """Reject any method other than POST.

    Raises:
        MethodNotAllowed: For every non-POST method.
    """
    if method.upper() not in ALLOWED_METHODS:
        logger.warning("webhook_method_not_allowed", method=method)
        raise MethodNotAllowed(method)


def parse_json_body(raw_body: bytes) -> object:
    """Parse the request body as JSON without assuming its shape.

    Raises:
        MalformedPayload: If the body is not valid JSON or nests too deeply.
    """
    try:
        return json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        logger.warning("webhook_invalid_json", error=str(exc))
        raise MalformedPayload(str(exc)) from exc


def ensure_dispatch_config(cfg: Settings) -> None:
    """Check the configuration needed to dispatch.

    Raises:
        MissingCredential: If the token is the only thing missing.
        ConfigInvalid: For any other combination of problems.
    """
    errors = validate_settings(cfg)
    if not errors:
        return
    logger.error("configuration_invalid", errors=errors)
    if not cfg.github_token and len(errors) == 1:
        raise MissingCredential()
    raise ConfigInvalid(errors)


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


@router.api_route("/docker-hub", methods=_ROUTED_METHODS, response_model=None)
async def docker_hub_webhook(
    request: Request,
    cfg: Annotated[Settings, Depends(get_settings)],
    service_map: Annotated[ServiceMap, Depends(get_service_map)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> JSONResponse:
    """Receive a Docker Hub push notification and forward it to GitHub.

    Pipeline: method gate, JSON parse, payload validation, transformation,
    configuration check, then a single repository dispatch.  Every failure
    is turned into a JSON error response here.
    """
    start = time.perf_counter()

    if cfg.enable_request_logging:
        logger.info(
            "webhook_request_received",
            method=request.method,
            path=request.url.path,
            content_type=request.headers.get("content-type"),
            user_agent=request.headers.get("user-agent"),
        )

    try:
        ensure_post(request.method)
        candidate = parse_json_body(await request.body())
        event = validate_payload(candidate, service_map)
        result = transform_payload(
            event,
            service_map,
            event_type=cfg.dispatch_event_type,
            forward_service_name=cfg.forward_service_name,
        )
        ensure_dispatch_config(cfg)
        await send_repository_dispatch(
            client,
            result.event,
            token=cfg.github_token,
            owner=cfg.github_owner,
            repo=cfg.github_repo,
            base_url=cfg.github_api_url,
            user_agent=cfg.github_user_agent,
        )
    except BridgeError as exc:
        processing_time_ms = _elapsed_ms(start)
        logger.warning(
            "webhook_rejected",
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            message=str(exc),
            processing_time_ms=processing_time_ms,
        )
        return error_response(exc, processing_time_ms)
    except Exception as exc:
        processing_time_ms = _elapsed_ms(start)
        logger.exception("webhook_failed", processing_time_ms=processing_time_ms)
        return error_response(exc, processing_time_ms)

    processing_time_ms = _elapsed_ms(start)
    if cfg.enable_performance_logging:
        logger.info(
            "webhook_processed",
            service=result.service,
            environment=result.environment.value,
            processing_time_ms=processing_time_ms,
        )

    body = WebhookSuccessResponse(
        message=(
            f"Dispatched {result.service} ({result.environment.value}) "
            f"to {cfg.github_owner}/{cfg.github_repo}"
        ),
        service=result.service,
        environment=result.environment,
        processing_time_ms=processing_time_ms,
    )
    return JSONResponse(status_code=200, content=body.model_dump(mode="json"))
