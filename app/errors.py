"""Error taxonomy for the webhook bridge and its mapping to HTTP responses.

Every failure is terminal for the request that raised it.  The webhook
handler catches ``BridgeError`` subclasses at its boundary and turns them
into JSON with :func:`error_response`; anything else is reported as a
generic 500 carrying the exception message.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

ALLOWED_METHODS = ["POST"]

INTERNAL_ERROR = "Internal server error"
CONFIGURATION_ERROR = "Server configuration error"


class BridgeError(Exception):
    """Base class for failures surfaced to the webhook caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = INTERNAL_ERROR

    def body(self, processing_time_ms: int) -> dict[str, Any]:
        return {
            "error": self.error,
            "message": str(self),
            "processing_time_ms": processing_time_ms,
        }


class MethodNotAllowed(BridgeError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    error = "Method not allowed"

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method {method} not allowed")

    def body(self, processing_time_ms: int) -> dict[str, Any]:
        return {"error": self.error, "allowed": list(ALLOWED_METHODS)}


class MalformedPayload(BridgeError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid JSON payload"

    def body(self, processing_time_ms: int) -> dict[str, Any]:
        return {"error": self.error}


class ValidationFailed(BridgeError):
    """The payload is structurally invalid; ``violations`` lists every problem."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid payload"

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(self.violations))

    def body(self, processing_time_ms: int) -> dict[str, Any]:
        return {"error": self.error, "details": self.violations}


class UnknownRepository(BridgeError):
    def __init__(self, name: str, supported: Sequence[str]) -> None:
        self.name = name
        self.supported = list(supported)
        super().__init__(
            f"Unknown repository: {name}. Supported repositories: {', '.join(self.supported)}"
        )


class TransformationFailed(BridgeError):
    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"Failed to transform payload: {cause}")


class MissingCredential(BridgeError):
    error = CONFIGURATION_ERROR

    def __init__(self) -> None:
        super().__init__("GITHUB_TOKEN environment variable not configured")

    def body(self, processing_time_ms: int) -> dict[str, Any]:
        return {"error": self.error}


class ConfigInvalid(BridgeError):
    error = CONFIGURATION_ERROR

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(self.violations))

    def body(self, processing_time_ms: int) -> dict[str, Any]:
        return {"error": self.error}


class UpstreamRejected(BridgeError):
    """GitHub answered the dispatch with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.upstream_status = status_code
        self.upstream_body = body
        super().__init__(f"GitHub API error: {status_code} - {body}")


class UpstreamUnreachable(BridgeError):
    """The dispatch request never got a response (connect error, timeout)."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"GitHub API unreachable: {cause!r}")


def error_response(exc: Exception, processing_time_ms: int) -> JSONResponse:
    """Shape *exc* into the JSON response returned to the webhook caller."""
    if isinstance(exc, BridgeError):
        headers = {"Allow": ", ".join(ALLOWED_METHODS)} if isinstance(exc, MethodNotAllowed) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.body(processing_time_ms),
            headers=headers,
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": INTERNAL_ERROR,
            "message": str(exc) or exc.__class__.__name__,
            "processing_time_ms": processing_time_ms,
        },
    )
