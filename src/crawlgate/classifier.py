"""Request classification: pass the request through, or prerender it.

The decision is derived per request and never cached. The classifier
holds only read-only tables, so identical requests always classify
identically.
"""

from dataclasses import dataclass
from enum import Enum

from crawlgate.http.request import Request
from crawlgate.signatures import SignatureSet


class RoutingDecision(Enum):
    """What the gateway does with a request."""

    PASS_THROUGH = "pass-through"
    FORWARD = "forward"


@dataclass(frozen=True, slots=True)
class Classification:
    """A routing decision and the rule that produced it.

    ``reason`` is one of ``"method"``, ``"static-asset"``, ``"crawler"``,
    ``"legacy-marker"`` or ``"browser"``.
    """

    decision: RoutingDecision
    reason: str

    @property
    def forward(self) -> bool:
        return self.decision is RoutingDecision.FORWARD


class RequestClassifier:
    """Decide whether a request should be served by the prerendering service.

    Rules, first match wins:

    1. Method outside ``methods``: pass through (mutating calls are opaque).
    2. Path ends with a static-asset extension: pass through.
    3. User-Agent matches a crawler signature: forward.
    4. Query string carries the legacy ``_escaped_fragment_`` key: forward.
    5. Anything else: pass through.
    """

    __slots__ = ("_legacy_param", "_methods", "_signatures")

    def __init__(
        self,
        signatures: SignatureSet,
        *,
        methods: tuple[str, ...] = ("GET", "HEAD"),
        legacy_param: str = "_escaped_fragment_",
    ) -> None:
        self._signatures = signatures
        self._methods = frozenset(m.upper() for m in methods)
        self._legacy_param = legacy_param

    def classify(self, request: Request) -> Classification:
        if request.method.upper() not in self._methods:
            return Classification(RoutingDecision.PASS_THROUGH, "method")
        if self._signatures.static_assets.matches(request.path):
            return Classification(RoutingDecision.PASS_THROUGH, "static-asset")
        if self._signatures.crawlers.matches(request.user_agent):
            return Classification(RoutingDecision.FORWARD, "crawler")
        if self._legacy_param in request.query:
            return Classification(RoutingDecision.FORWARD, "legacy-marker")
        return Classification(RoutingDecision.PASS_THROUGH, "browser")
