"""``crawlgate run``: serve the gateway with uvicorn.

Builds a GateConfig from ``CRAWLGATE_*`` variables, applies CLI
overrides, wraps the origin (an ASGI app or a remote URL) in a Gateway,
and starts uvicorn.
"""

import argparse
import dataclasses
import logging
import sys

from crawlgate.cli._resolve import resolve_origin
from crawlgate.config import GateConfig
from crawlgate.errors import ConfigurationError
from crawlgate.gateway import Gateway


def build_gateway(args: argparse.Namespace) -> Gateway:
    """Build (and freeze) the gateway described by *args*.

    Raises:
        ConfigurationError: Invalid configuration or no origin.
        ModuleNotFoundError, AttributeError, TypeError: Origin app not resolvable.
    """
    config = GateConfig.from_env()
    overrides = {
        "host": args.host,
        "port": args.port,
        "environment": args.environment,
        "origin_url": args.origin,
        "signatures_file": args.signatures,
    }
    config = dataclasses.replace(
        config, **{key: value for key, value in overrides.items() if value is not None}
    )

    if args.app and args.origin:
        raise ConfigurationError("Pass either an origin app or --origin, not both")

    origin = resolve_origin(args.app) if args.app else None
    gateway = Gateway(origin, config)
    gateway._ensure_frozen()
    return gateway


def configure_logging(config: GateConfig) -> None:
    if config.debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_server(args: argparse.Namespace) -> None:
    """Start the gateway under uvicorn."""
    try:
        gateway = build_gateway(args)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    config = gateway.config
    configure_logging(config)
    logging.getLogger("crawlgate.server").info(
        "crawlgate %s on %s:%d (render service %s)",
        config.environment,
        config.host,
        config.port,
        config.render_service_url,
    )

    import uvicorn

    uvicorn.run(
        gateway,
        host=config.host,
        port=config.port,
        log_level="debug" if config.debug else config.log_level,
        proxy_headers=config.trust_forwarded_headers,
    )
