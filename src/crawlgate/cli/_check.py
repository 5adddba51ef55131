"""``crawlgate check``: show how the gateway would route one request.

Classification only; nothing is fetched. Handy when tuning a custom
signatures file::

    $ crawlgate check https://shop.example.com/p/42 -A "Googlebot/2.1"
    decision: forward
    reason:   crawler
    target:   https://service.prerender.io/https://shop.example.com/p/42
"""

import argparse
import sys
from urllib.parse import unquote, urlsplit

from crawlgate.classifier import RequestClassifier
from crawlgate.config import GateConfig
from crawlgate.errors import ConfigurationError
from crawlgate.http.headers import Headers
from crawlgate.http.query import QueryParams
from crawlgate.http.request import Request
from crawlgate.render import RenderClient
from crawlgate.signatures import load_signatures


async def _no_body() -> dict[str, object]:
    return {"type": "http.request", "body": b"", "more_body": False}


def request_from_url(url: str, *, method: str = "GET", user_agent: str = "") -> Request:
    """Build a bodiless Request for an absolute URL."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        msg = f"Expected an absolute URL, got {url!r}"
        raise ValueError(msg)
    raw_path = parts.path or "/"
    pairs = [("host", parts.netloc)]
    if user_agent:
        pairs.append(("user-agent", user_agent))
    return Request(
        method=method.upper(),
        scheme=parts.scheme,
        path=unquote(raw_path),
        headers=Headers.from_pairs(pairs),
        query=QueryParams(parts.query.encode("latin-1")),
        http_version="1.1",
        server=None,
        client=None,
        _receive=_no_body,
        raw_path=raw_path.encode("latin-1"),
    )


def run_check(args: argparse.Namespace) -> None:
    """Print the classification of ``args.url``."""
    config = GateConfig.from_env()
    try:
        signatures = load_signatures(args.signatures or config.signatures_file)
        request = request_from_url(args.url, method=args.method, user_agent=args.user_agent)
    except (ConfigurationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    classifier = RequestClassifier(
        signatures,
        methods=config.methods,
        legacy_param=config.legacy_param,
    )
    result = classifier.classify(request)

    print(f"decision: {result.decision.value}")
    print(f"reason:   {result.reason}")
    if result.forward:
        print(f"target:   {RenderClient(config).target_url(request)}")
