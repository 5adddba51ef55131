"""ASGI handler: translates ASGI scope/messages to crawlgate types.

Builds the Request, runs it through the middleware chain, and either
sends the Response the chain produced or, when the chain fell through,
lets the origin application answer on the raw ASGI channel.
"""

import logging
from collections.abc import Callable
from typing import Any

from crawlgate._internal.asgi import ASGIApp, Receive, Scope, Send
from crawlgate.http.request import Request
from crawlgate.http.response import Delegated, Response
from crawlgate.middleware.protocol import AnyResponse, Next
from crawlgate.server.sender import send_response

logger = logging.getLogger("crawlgate.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    middleware: tuple[Callable[..., Any], ...],
    origin: ASGIApp,
    trust_forwarded: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, trust_forwarded=trust_forwarded)

    started = False

    async def tracking_send(message: Any) -> None:
        nonlocal started
        if message["type"] == "http.response.start":
            started = True
        await send(message)

    # Innermost handler: the origin answers directly on the ASGI channel
    async def dispatch(req: Request) -> AnyResponse:  # noqa: ARG001
        await origin(scope, receive, tracking_send)
        return Delegated()

    handler: Next = dispatch
    for mw in reversed(middleware):

        async def make_next(req: Request, _mw: Any = mw, _next: Next = handler) -> AnyResponse:
            return await _mw(req, _next)

        handler = make_next

    try:
        response = await handler(request)
    except Exception:
        if started:
            raise
        logger.exception("500 %s %s", request.method, request.path)
        response = Response(
            body="Internal Server Error",
            status=500,
            content_type="text/plain; charset=utf-8",
        )

    if isinstance(response, Delegated):
        return
    if started:
        logger.warning(
            "discarding %d response for %s %s: origin already answered",
            response.status,
            request.method,
            request.path,
        )
        return
    await send_response(response, tracking_send)
