"""Prerender middleware: route crawlers to the prerendering service.

Search and social crawlers (and requests carrying the legacy
``_escaped_fragment_`` marker) get server-rendered HTML from the
prerendering service. Everything else falls through to the next handler
untouched.

The origin application is never blocked by the service: transport errors,
timeouts, non-2xx answers, and any unexpected fault in the routing logic
all fall through to the next handler.
"""

import logging

from crawlgate.classifier import RequestClassifier
from crawlgate.errors import RenderError
from crawlgate.http.request import Request
from crawlgate.http.response import Response
from crawlgate.middleware.protocol import AnyResponse, Next
from crawlgate.render import RenderClient

logger = logging.getLogger("crawlgate.prerender")


class PrerenderMiddleware:
    """Serve prerendered HTML to crawlers; pass everyone else through.

    Usage::

        from crawlgate.classifier import RequestClassifier
        from crawlgate.middleware import PrerenderMiddleware
        from crawlgate.render import RenderClient
        from crawlgate.signatures import load_signatures

        gateway.add_middleware(PrerenderMiddleware(
            RequestClassifier(load_signatures()),
            RenderClient(config),
        ))

    ``Gateway`` installs one automatically; build it by hand only to
    reuse the routing inside another middleware stack.
    """

    __slots__ = ("classifier", "client")

    def __init__(self, classifier: RequestClassifier, client: RenderClient) -> None:
        self.classifier = classifier
        self.client = client

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        """Relay the prerendered page, or fall through."""
        rendered = await self._try_render(request)
        if rendered is None:
            return await next(request)
        return rendered

    async def _try_render(self, request: Request) -> Response | None:
        """One outbound call at most. ``None`` means pass through.

        Never raises (apart from cancellation): availability of the origin
        takes precedence over prerender correctness.
        """
        try:
            result = self.classifier.classify(request)
            if not result.forward:
                logger.debug(
                    "pass-through (%s) %s %s", result.reason, request.method, request.path
                )
                return None

            logger.info(
                "prerender (%s) %s %s ua=%r",
                result.reason,
                request.method,
                request.url,
                request.user_agent,
            )
            return await self.client.render(request)
        except RenderError as exc:
            logger.warning("prerender fallback %s %s: %s", request.method, request.path, exc)
            return None
        except Exception:
            logger.exception("prerender routing failed for %s %s", request.method, request.path)
            return None
