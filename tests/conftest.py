"""Shared fixtures: a recording origin app and a fake prerender service."""

from typing import Any

import httpx
import pytest

from crawlgate.config import GateConfig
from crawlgate.gateway import Gateway

GOOGLEBOT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
CHROME = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/100.0 Safari/537.36"
RENDERED = b"<html><head><title>Rose Oud</title></head><body>rendered</body></html>"


class RecordingOrigin:
    """ASGI stand-in for the storefront SPA; records every call."""

    def __init__(self, body: bytes = b'<div id="root"></div>', status: int = 200) -> None:
        self.body = body
        self.status = status
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        self.calls.append((scope["method"], scope["path"]))
        await send(
            {
                "type": "http.response.start",
                "status": self.status,
                "headers": [(b"content-type", b"text/html"), (b"x-origin", b"spa")],
            }
        )
        await send({"type": "http.response.body", "body": self.body})


class FakeRenderService:
    """Prerender service behind an ``httpx.MockTransport``."""

    def __init__(
        self,
        *,
        status: int = 200,
        body: bytes = RENDERED,
        headers: dict[str, str | bytes] | None = None,
        error: type[httpx.HTTPError] | None = None,
    ) -> None:
        self.status = status
        self.body = body
        self.headers = headers if headers is not None else {"content-type": "text/plain"}
        self.error = error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("render service unavailable", request=request)
        return httpx.Response(self.status, content=self.body, headers=self.headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def origin() -> RecordingOrigin:
    return RecordingOrigin()


@pytest.fixture
def render_service() -> FakeRenderService:
    return FakeRenderService()


@pytest.fixture
def config() -> GateConfig:
    return GateConfig(render_token="test-token")


@pytest.fixture
def gateway(origin: RecordingOrigin, render_service: FakeRenderService, config: GateConfig) -> Gateway:
    return Gateway(origin, config, transport=render_service.transport)
