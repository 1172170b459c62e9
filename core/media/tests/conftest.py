"""Pytest fixtures for media tests.

Provides an in-memory static asset host (httpx.MockTransport) so probing
and caption loading run without a network.
"""

import httpx
import pytest

from core.lessons.types import Lesson
from core.media.clock import MediaElement


class FakeAssetHost:
    """Serves `files` by path and records every request made to it."""

    def __init__(
        self,
        files: dict[str, str] | None = None,
        head_supported: bool = True,
        fail_paths: tuple[str, ...] = (),
    ):
        self.files = dict(files or {})
        self.head_supported = head_supported
        self.fail_paths = set(fail_paths)
        self.calls: list[tuple[str, str]] = []
        self.client = httpx.AsyncClient(
            transport=httpx.MockTransport(self._handle), base_url="http://assets.test"
        )

    def _handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        if path in self.fail_paths:
            raise httpx.ConnectError("connection refused", request=request)
        if request.method == "HEAD" and not self.head_supported:
            return httpx.Response(405)
        if path not in self.files:
            return httpx.Response(404)
        if request.method == "HEAD":
            return httpx.Response(200)
        if "range" in request.headers:
            return httpx.Response(206, text=self.files[path][:256])
        return httpx.Response(200, text=self.files[path])

    def requested(self, path: str) -> bool:
        return any(p == path for _method, p in self.calls)


class RejectingElement(MediaElement):
    """A media element whose play() is refused with a given error."""

    def __init__(self, kind, src=None, error: Exception | None = None):
        super().__init__(kind, src)
        self.reject_with = error
        self.play_calls = 0

    async def _start(self) -> None:
        self.play_calls += 1
        if self.reject_with is not None:
            raise self.reject_with


@pytest.fixture
def asset_host():
    """Factory for FakeAssetHost instances."""
    return FakeAssetHost


@pytest.fixture
def rejecting_element():
    return RejectingElement


@pytest.fixture
def inbox_lesson():
    return Lesson(
        id="inbox-zero",
        title="Inbox Zero in Minutes",
        description="Triage emails quickly with three labels. Batch respond twice daily.",
        duration_seconds=100,
    )
