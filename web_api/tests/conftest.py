# web_api/tests/conftest.py
"""Pytest fixtures for web API tests.

Routes get their services from `get_services`; here that dependency is
overridden with services whose HTTP client talks to an in-memory asset
host, so API tests run without a network or the lifespan.
"""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.media.settings import SettingsStore
from web_api.services import build_services, get_services

INBOX_VTT = """WEBVTT

00:00:00.000 --> 00:00:02.800
Triage first.

00:00:03.000 --> 00:00:05.800
Then batch replies.
"""

CONTENT_TYPES = {
    ".mp4": "video/mp4",
    ".mp3": "audio/mpeg",
    ".vtt": "text/vtt; charset=utf-8",
    ".json": "application/json",
    ".txt": "text/plain",
    ".jpg": "image/jpeg",
}


@pytest.fixture
def asset_files():
    """Files served by the fake asset host, keyed by path."""
    return {
        "/assets/video/mp4/quick-inbox-zero.mp4": "mp4",
        "/assets/video/thumb/quick-inbox-zero.jpg": "jpg",
        "/assets/captions/quick-inbox-zero.vtt": INBOX_VTT,
        "/assets/audio/mp3/focus-60.mp3": "mp3",
    }


@pytest.fixture
def asset_client(asset_files):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path not in asset_files:
            return httpx.Response(404)
        suffix = path[path.rfind("."):]
        headers = {"content-type": CONTENT_TYPES.get(suffix, "application/octet-stream")}
        if request.method == "HEAD":
            return httpx.Response(200, headers=headers)
        return httpx.Response(200, headers=headers, text=asset_files[path])

    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://assets.test"
    )


@pytest.fixture
def services(asset_client, tmp_path):
    return build_services(asset_client, SettingsStore(tmp_path / "settings.json"))


@pytest_asyncio.fixture
async def client(services):
    """HTTP client for the app with services overridden."""
    from main import app

    app.dependency_overrides[get_services] = lambda: services
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
