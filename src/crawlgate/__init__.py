"""Crawlgate: a prerendering gateway for single-page storefronts.

Crawlers get server-rendered HTML from a prerendering service; browsers
get the live application. Any prerender failure falls back to the app.

Basic usage::

    from crawlgate import GateConfig, Gateway
    from storefront import app as storefront

    gateway = Gateway(storefront, GateConfig(environment="production"))
"""

from crawlgate.classifier import Classification, RequestClassifier, RoutingDecision
from crawlgate.config import GateConfig
from crawlgate.errors import (
    ConfigurationError,
    CrawlgateError,
    RenderError,
    RenderServiceError,
    RenderTransportError,
)
from crawlgate.gateway import Gateway
from crawlgate.http.request import Request
from crawlgate.http.response import Delegated, Response
from crawlgate.middleware.prerender import PrerenderMiddleware
from crawlgate.proxy import UpstreamProxy
from crawlgate.render import RenderClient
from crawlgate.signatures import SignatureSet, load_signatures

__version__ = "0.1.0"

__all__ = [
    "Classification",
    "ConfigurationError",
    "CrawlgateError",
    "Delegated",
    "GateConfig",
    "Gateway",
    "PrerenderMiddleware",
    "RenderClient",
    "RenderError",
    "RenderServiceError",
    "RenderTransportError",
    "Request",
    "RequestClassifier",
    "Response",
    "RoutingDecision",
    "SignatureSet",
    "UpstreamProxy",
    "__version__",
    "load_signatures",
]
