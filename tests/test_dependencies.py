"""Tests for the FastAPI dependency providers."""

import httpx
import pytest

from app.config import Settings, settings
from app.dependencies import get_http_client, get_service_map, get_settings


def test_get_settings_returns_module_settings():
    assert get_settings() is settings


def test_get_service_map_follows_settings():
    cfg = Settings(_env_file=None, service_map={"ns/image": "image"})

    service_map = get_service_map(cfg)

    assert service_map.supported_repositories() == ["ns/image"]
    assert service_map.map_to_service("ns/image") == "image"


@pytest.mark.anyio
async def test_get_http_client_uses_configured_timeout():
    cfg = Settings(_env_file=None, webhook_timeout_ms=2500)

    generator = get_http_client(cfg)
    client = await generator.__anext__()
    assert isinstance(client, httpx.AsyncClient)
    assert client.timeout.connect == 2.5
    assert client.timeout.read == 2.5

    await generator.aclose()
    assert client.is_closed
