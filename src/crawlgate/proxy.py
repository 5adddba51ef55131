"""Upstream proxy: the origin for standalone deployments.

On an edge platform "pass through" means handing the request to the
platform's next hop. Run on its own, the gateway needs that hop too:
``UpstreamProxy`` is an ASGI app that forwards each request to a remote
origin over httpx and streams the answer back unchanged.
"""

import logging

import httpx

from crawlgate._internal.asgi import Receive, Scope, Send
from crawlgate.http.request import Request
from crawlgate.http.response import Response
from crawlgate.server.sender import send_response

logger = logging.getLogger("crawlgate.proxy")

# Hop-by-hop headers (RFC 9110 section 7.6.1) are never forwarded.
_HOP_BY_HOP = frozenset(
    {
        b"connection",
        b"keep-alive",
        b"proxy-authenticate",
        b"proxy-authorization",
        b"proxy-connection",
        b"te",
        b"trailer",
        b"transfer-encoding",
        b"upgrade",
    }
)


class UpstreamProxy:
    """Forward HTTP requests to a remote origin.

    Usage::

        gateway = Gateway(UpstreamProxy("http://storefront:3000"))

    Status, headers, and raw body bytes are relayed as received, so
    compressed origin responses stay compressed. A transport failure
    before the response starts yields ``502 Bad Gateway``.
    """

    __slots__ = ("_origin", "_timeout", "_transport")

    def __init__(
        self,
        origin_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._origin = origin_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def origin_url(self) -> str:
        return self._origin

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        body = await request.body()
        url = f"{self._origin}{request.url}"
        headers = self._forward_headers(request)

        started = False
        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            try:
                async with client.stream(
                    request.method,
                    url,
                    headers=headers,
                    content=body,
                ) as upstream:
                    await send(
                        {
                            "type": "http.response.start",
                            "status": upstream.status_code,
                            "headers": [
                                (name.lower(), value)
                                for name, value in upstream.headers.raw
                                if name.lower() not in _HOP_BY_HOP
                            ],
                        }
                    )
                    started = True
                    async for chunk in upstream.aiter_raw():
                        if chunk:
                            await send(
                                {"type": "http.response.body", "body": chunk, "more_body": True}
                            )
            except httpx.HTTPError as exc:
                if started:
                    raise
                logger.warning("origin unreachable %s %s: %s", request.method, url, exc)
                await send_response(
                    Response(
                        body="Bad Gateway",
                        status=502,
                        content_type="text/plain; charset=utf-8",
                    ),
                    send,
                )
                return

        await send({"type": "http.response.body", "body": b"", "more_body": False})

    def _forward_headers(self, request: Request) -> list[tuple[bytes, bytes]]:
        """End-to-end request headers plus X-Forwarded-Host/Proto."""
        headers: list[tuple[bytes, bytes]] = [
            (name, value)
            for name, value in request.headers.raw
            if name.lower() not in _HOP_BY_HOP and name.lower() != b"host"
        ]
        if request.host:
            headers.append((b"x-forwarded-host", request.host.encode("latin-1")))
        headers.append((b"x-forwarded-proto", request.scheme.encode("latin-1")))
        if request.client is not None:
            headers.append((b"x-forwarded-for", request.client[0].encode("latin-1")))
        return headers
