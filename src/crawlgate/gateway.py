"""Crawlgate gateway: the ASGI application.

Mutable during setup (middleware, lifecycle hooks).
Frozen at runtime on lifespan startup or the first request.
"""

import inspect
import threading
from collections.abc import Callable
from typing import Any

import httpx

from crawlgate._internal.asgi import ASGIApp, Receive, Scope, Send
from crawlgate.classifier import RequestClassifier
from crawlgate.config import GateConfig
from crawlgate.errors import ConfigurationError
from crawlgate.middleware.prerender import PrerenderMiddleware
from crawlgate.middleware.protocol import Middleware
from crawlgate.proxy import UpstreamProxy
from crawlgate.render import RenderClient
from crawlgate.server.handler import handle_request
from crawlgate.signatures import SignatureSet, load_signatures


class Gateway:
    """Prerendering gateway in front of an origin application.

    Wraps any ASGI app (the storefront). Crawler traffic is answered
    from the prerendering service; everything else reaches the origin
    on the raw ASGI channel, so its responses stream through unchanged::

        from crawlgate import GateConfig, Gateway
        from storefront import app as storefront

        gateway = Gateway(storefront, GateConfig(environment="production"))

    With no origin app, ``config.origin_url`` is proxied instead::

        gateway = Gateway(config=GateConfig(origin_url="http://storefront:3000"))

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one worker thread compiles the gateway.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_origin",
        "_prerender",
        "_shutdown_hooks",
        "_signatures",
        "_startup_hooks",
        "_transport",
        "config",
    )

    def __init__(
        self,
        origin: ASGIApp | None = None,
        config: GateConfig | None = None,
        *,
        signatures: SignatureSet | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config: GateConfig = config or GateConfig()
        self._origin: ASGIApp | None = origin
        self._signatures: SignatureSet | None = signatures
        # Outbound transport for the render client (tests inject a MockTransport)
        self._transport = transport
        self._middleware_list: list[Middleware] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._middleware: tuple[Callable[..., Any], ...] = ()
        self._prerender: PrerenderMiddleware | None = None

    # -- Setup --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware that runs outside the prerender step."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a startup hook (sync or async), run on lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a shutdown hook (sync or async), run on lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    @property
    def origin(self) -> ASGIApp | None:
        return self._origin

    @property
    def prerender(self) -> PrerenderMiddleware:
        """The compiled prerender middleware (freezes the gateway)."""
        self._ensure_frozen()
        assert self._prerender is not None
        return self._prerender

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan directly, sends HTTP scopes through the request
        pipeline, and hands any other scope (websocket) to the origin.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()
        assert self._origin is not None

        if scope["type"] != "http":
            await self._origin(scope, receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            middleware=self._middleware,
            origin=self._origin,
            trust_forwarded=self.config.trust_forwarded_headers,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the gateway at startup so configuration errors are
        reported as ``lifespan.startup.failed`` before any traffic.
        The origin's own lifespan is not driven from here.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    for hook in self._startup_hooks:
                        result = hook()
                        if inspect.isawaitable(result):
                            await result
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    result = hook()
                    if inspect.isawaitable(result):
                        await result
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the gateway into its frozen runtime state.

        MUST only be called while holding _freeze_lock.

        Raises:
            ConfigurationError: Invalid config, unreadable signatures,
                or no origin to pass traffic to.
        """
        config = self.config

        # 1. Fail fast on configuration (e.g. missing production token)
        config.validate()

        # 2. Resolve the origin
        if self._origin is None:
            if not config.origin_url:
                msg = "Gateway needs an origin app or GateConfig(origin_url=...)"
                raise ConfigurationError(msg)
            self._origin = UpstreamProxy(config.origin_url, timeout=config.origin_timeout)

        # 3. Load signature tables once; read-only from here on
        if self._signatures is None:
            self._signatures = load_signatures(config.signatures_file)

        classifier = RequestClassifier(
            self._signatures,
            methods=config.methods,
            legacy_param=config.legacy_param,
        )
        self._prerender = PrerenderMiddleware(
            classifier,
            RenderClient(config, transport=self._transport),
        )

        # 4. User middleware wraps the prerender step, which sits innermost
        self._middleware = (*self._middleware_list, self._prerender)

        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the gateway after it has started serving requests. "
                "Add middleware and hooks before the first request."
            )
            raise RuntimeError(msg)
