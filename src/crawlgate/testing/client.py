"""Async test client for crawlgate gateways.

Uses the same Response type as production. Sends requests through the
ASGI interface directly: no sockets, no HTTP parsing.
"""

import inspect
from typing import Any
from urllib.parse import unquote

from crawlgate._internal.asgi import ASGIApp
from crawlgate.gateway import Gateway
from crawlgate.http.response import Response


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for any ASGI app, usually a ``Gateway``.

    Usage::

        async with TestClient(gateway) as client:
            response = await client.get("/", headers={"user-agent": "Googlebot"})
            assert response.status == 200

    For a ``Gateway``, entering the context freezes it and runs its
    startup hooks, mirroring lifespan startup.
    """

    __slots__ = ("app", "host", "scheme")

    def __init__(self, app: ASGIApp, *, scheme: str = "https", host: str = "testserver") -> None:
        self.app = app
        self.scheme = scheme
        self.host = host

    async def __aenter__(self) -> "TestClient":
        if isinstance(self.app, Gateway):
            self.app._ensure_frozen()
            for hook in self.app._startup_hooks:
                result = hook()
                if inspect.isawaitable(result):
                    await result
        return self

    async def __aexit__(self, *args: object) -> None:
        if isinstance(self.app, Gateway):
            for hook in self.app._shutdown_hooks:
                result = hook()
                if inspect.isawaitable(result):
                    await result

    async def get(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def head(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app.

        *path* is taken as sent on the wire: percent-escapes stay in
        ``raw_path`` and are decoded into ``path``.
        """
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        merged = {"host": self.host, **(headers or {})}
        raw_headers: list[tuple[bytes, bytes]] = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in merged.items()
        ]

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "scheme": self.scheme,
            "path": unquote(path_part),
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": (self.host, 443 if self.scheme == "https" else 80),
            "client": ("127.0.0.1", 0),
        }

        request_body = body or b""
        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        content_type = "text/html; charset=utf-8"
        extra_headers: list[tuple[str, str]] = []
        for name_b, value_b in response_headers:
            name_str = name_b.decode("latin-1").lower()
            value_str = value_b.decode("latin-1")
            if name_str == "content-type":
                content_type = value_str
            else:
                extra_headers.append((name_str, value_str))

        return Response(
            body=b"".join(response_body_parts),
            status=response_status,
            content_type=content_type,
            headers=tuple(extra_headers),
        )
