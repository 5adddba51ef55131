"""Crawlgate CLI: run the gateway, or check how a request would be routed.

Entry point registered as ``crawlgate`` in ``pyproject.toml``::

    [project.scripts]
    crawlgate = "crawlgate.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``crawlgate`` command."""
    parser = argparse.ArgumentParser(
        prog="crawlgate",
        description="Crawlgate: serve prerendered HTML to crawlers, the live app to everyone else.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- crawlgate run -----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the gateway server")
    run_parser.add_argument(
        "app",
        nargs="?",
        default=None,
        help="Origin ASGI app import string (e.g. storefront:app)",
    )
    run_parser.add_argument(
        "--origin",
        default=None,
        help="Proxy pass-through traffic to this URL instead of an ASGI app",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--env",
        dest="environment",
        default=None,
        help="Deployment environment (production requires a prerender token)",
    )
    run_parser.add_argument(
        "--signatures",
        default=None,
        help="TOML file with crawler patterns and static extensions",
    )

    # -- crawlgate check ---------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Show how a request would be routed")
    check_parser.add_argument("url", help="Absolute URL (e.g. https://shop.example.com/p/1)")
    check_parser.add_argument("--user-agent", "-A", default="", help="User-Agent header")
    check_parser.add_argument("--method", "-X", default="GET", help="HTTP method")
    check_parser.add_argument(
        "--signatures",
        default=None,
        help="TOML file with crawler patterns and static extensions",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from crawlgate.cli._run import run_server

        run_server(args)
    elif args.command == "check":
        from crawlgate.cli._check import run_check

        run_check(args)
