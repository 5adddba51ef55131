"""Prerendering service client.

One GET per forwarded request, over raw HTTP via httpx. The original
absolute URL is appended to the service host::

    https://service.prerender.io/https://shop.example.com/products/42?ref=x

A fresh ``httpx.AsyncClient`` is opened for each call inside ``async with``,
so a cancelled request (client disconnect) releases its connection.
"""

import httpx

from crawlgate.config import GateConfig
from crawlgate.errors import RenderServiceError, RenderTransportError
from crawlgate.http.request import Request
from crawlgate.http.response import HTML_CONTENT_TYPE, Response

# Not relayed from the service: hop-by-hop, body framing, and the
# content type (always replaced with HTML).
_DROPPED_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-connection",
        "transfer-encoding",
        "upgrade",
        "te",
        "trailer",
        "content-length",
        "content-encoding",
        "content-type",
    }
)

# Cap on how much of an error body is kept for logging.
_DETAIL_LIMIT = 200


class RenderClient:
    """Fetch prerendered HTML for a request.

    Usage::

        client = RenderClient(GateConfig(render_token="..."))
        response = await client.render(request)

    ``transport`` is handed to ``httpx.AsyncClient``; tests pass an
    ``httpx.MockTransport``.
    """

    __slots__ = ("_base_url", "_transport", "config")

    def __init__(
        self,
        config: GateConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._base_url = config.render_service_url.rstrip("/")
        self._transport = transport

    def target_url(self, request: Request) -> str:
        """Service URL with the original absolute URL embedded as its path."""
        return f"{self._base_url}/{request.absolute_url}"

    def request_headers(self, request: Request) -> dict[str, str | bytes]:
        """Headers for the outbound call: auth token, original UA, no compression.

        The User-Agent goes out as the exact bytes the caller sent.
        """
        return {
            self.config.render_token_header: self.config.resolve_token(),
            "User-Agent": request.user_agent.encode("latin-1"),
            "Accept-Encoding": "identity",
        }

    async def render(self, request: Request) -> Response:
        """Fetch the rendered page for *request*.

        Raises:
            RenderTransportError: The service could not be reached or timed out.
            RenderServiceError: The service answered with a non-2xx status.
        """
        url = self.target_url(request)
        headers = self.request_headers(request)

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self.config.render_timeout,
        ) as client:
            try:
                upstream = await client.get(url, headers=headers)
            except httpx.HTTPError as exc:
                msg = f"{type(exc).__name__} fetching {url}: {exc}"
                raise RenderTransportError(msg) from exc

        if not upstream.is_success:
            raise RenderServiceError(upstream.status_code, upstream.text[:_DETAIL_LIMIT])

        # Raw bytes through latin-1 so send_response writes them back unchanged
        relayed = tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1"))
            for name, value in upstream.headers.raw
            if name.decode("latin-1").lower() not in _DROPPED_HEADERS
        )
        return Response(
            body=upstream.content,
            status=upstream.status_code,
            content_type=HTML_CONTENT_TYPE,
            headers=relayed,
        )
