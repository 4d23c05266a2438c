"""Shared test fixtures for settings, a fake GitHub API and the FastAPI test client."""

from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.config import DEFAULT_SERVICE_MAP, Settings
from app.dependencies import get_http_client, get_settings
from app.main import app
from app.services.service_map import ServiceMap

TEST_TOKEN = "ghp_test_token"


class FakeGitHub:
    """httpx MockTransport handler that records requests and replays a canned response.

    Set ``status_code``/``text`` to change the reply, or ``error`` to raise a
    transport exception instead of answering.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 204
        self.text = ""
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.text)

    @property
    def dispatches(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/dispatches")]


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a token configured and no .env file involved."""
    return Settings(
        _env_file=None,
        github_token=TEST_TOKEN,
        github_owner="Estatemanner",
        github_repo="cadastral-deploy",
    )


@pytest.fixture
def service_map() -> ServiceMap:
    return ServiceMap(DEFAULT_SERVICE_MAP)


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Create a fresh fake GitHub API for test inspection."""
    return FakeGitHub()


@pytest.fixture
async def client(
    test_settings: Settings,
    fake_github: FakeGitHub,
) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient with dependencies overridden.

    Settings come from ``test_settings`` (tests may mutate it before the
    request) and every outbound GitHub call goes to ``fake_github``.
    """

    async def _override_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
        async with httpx.AsyncClient(transport=httpx.MockTransport(fake_github)) as github:
            yield github

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_http_client] = _override_http_client
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
