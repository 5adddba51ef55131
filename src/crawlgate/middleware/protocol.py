"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> AnyResponse: ...

No base class required. The gateway checks the shape, not the lineage.

``next`` returns either a concrete ``Response`` or ``Delegated`` (the
origin application already answered). Both share the ``.with_header()`` /
``.with_status()`` chainable API, so middleware can treat them uniformly.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from crawlgate.http.request import Request
from crawlgate.http.response import Delegated, Response

# Any response the pipeline can produce
AnyResponse: TypeAlias = Response | Delegated

# The next handler in the middleware chain
Next: TypeAlias = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Protocol for gateway middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> AnyResponse:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class BlockList:
            async def __call__(self, request: Request, next: Next) -> AnyResponse:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...
