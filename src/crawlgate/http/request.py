"""Immutable HTTP request.

Frozen metadata with async body access. The gateway only ever reads
method, URL, and headers to make its decision; the body is read solely
when a request is proxied to a remote origin.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from crawlgate._internal.asgi import Receive
from crawlgate.http.headers import Headers
from crawlgate.http.query import QueryParams

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, scheme, path, headers, query) is frozen at creation.
    Body is accessed asynchronously via ``.body()`` / ``.stream()``.
    """

    method: str
    scheme: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Path bytes as sent on the wire (percent-encoding intact), if known
    raw_path: bytes | None = None

    # Private: mutable cache for the body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def user_agent(self) -> str:
        """The User-Agent header, or ``""`` when absent."""
        return self.headers.get("user-agent") or ""

    @property
    def host(self) -> str:
        """Host (with port when non-default) the client addressed.

        Prefers the ``Host`` header; falls back to the ASGI ``server``
        tuple for HTTP/1.0 clients that omit it.
        """
        host = self.headers.get("host")
        if host:
            return host
        if self.server is None:
            return ""
        name, port = self.server
        if port is None or _DEFAULT_PORTS.get(self.scheme) == port:
            return name
        return f"{name}:{port}"

    @property
    def query_string(self) -> str:
        """Raw query string without the leading ``?``."""
        return self.query.raw

    @property
    def encoded_path(self) -> str:
        """Path with its percent-encoding intact.

        ``path`` is decoded, so an encoded ``%23`` or ``%3F`` would turn
        into a fragment or query delimiter if embedded in another URL.
        """
        if self.raw_path:
            return self.raw_path.decode("latin-1")
        return quote(self.path)

    @property
    def url(self) -> str:
        """Encoded path plus query string."""
        qs = self.query_string
        if qs:
            return f"{self.encoded_path}?{qs}"
        return self.encoded_path

    @property
    def absolute_url(self) -> str:
        """Full URL as the client requested it: ``scheme://host/path?query``."""
        return f"{self.scheme}://{self.host}{self.url}"

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached: the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: dict[str, Any],
        receive: Receive,
        *,
        trust_forwarded: bool = False,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable.

        With ``trust_forwarded``, ``X-Forwarded-Proto`` and
        ``X-Forwarded-Host`` (set by a load balancer in front of the
        gateway) override the scheme and host seen on the socket.
        """
        raw_headers = tuple(scope.get("headers", ()))
        headers = Headers(raw_headers)
        scheme = scope.get("scheme", "http")

        if trust_forwarded:
            proto = headers.get("x-forwarded-proto")
            if proto:
                scheme = proto.split(",")[0].strip().lower()
            forwarded_host = headers.get("x-forwarded-host")
            if forwarded_host:
                host = forwarded_host.split(",")[0].strip()
                headers = Headers(
                    tuple((n, v) for n, v in raw_headers if n.lower() != b"host")
                    + ((b"host", host.encode("latin-1")),)
                )

        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            scheme=scheme,
            path=scope["path"],
            headers=headers,
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
            raw_path=scope.get("raw_path"),
        )
