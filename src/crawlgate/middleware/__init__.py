"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> AnyResponse

Built-in middleware:
    PrerenderMiddleware -- Serve crawlers prerendered HTML, everyone else the origin
"""

from crawlgate.middleware.prerender import PrerenderMiddleware
from crawlgate.middleware.protocol import AnyResponse, Middleware, Next

__all__ = [
    "AnyResponse",
    "Middleware",
    "Next",
    "PrerenderMiddleware",
]
