"""Crawlgate exception hierarchy.

Shared across config, signatures, the render client, and the gateway so
every module raises and catches the same types.
"""


class CrawlgateError(Exception):
    """Base for all crawlgate-specific errors."""


class ConfigurationError(CrawlgateError):
    """Raised when gateway configuration is invalid.

    Typically raised during ``Gateway._freeze()`` at startup, so a
    misconfigured deployment fails before it serves a request.
    """


class RenderError(CrawlgateError):
    """Base for failures talking to the prerendering service."""


class RenderTransportError(RenderError):
    """Raised when the prerendering service cannot be reached (DNS, connect, timeout)."""


class RenderServiceError(RenderError):
    """Raised when the prerendering service answers with a non-success status."""

    def __init__(self, status: int, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        msg = f"prerender service returned {status}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
