"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Accessors --

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        if name.lower() == "content-type":
            return self.content_type
        for key, value in self.headers:
            if key.lower() == name.lower():
                return value
        return None

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class Delegated:
    """Sentinel response: the origin application already answered.

    Returned by the innermost handler after it handed the raw ASGI
    ``scope/receive/send`` to the origin. The origin's bytes went straight
    to the client, so there is nothing left to send.

    Provides no-op ``.with_*()`` methods so middleware chains don't crash.
    """

    def with_status(self, status: int) -> Delegated:  # noqa: ARG002
        """No-op: the origin chose its own status."""
        return self

    def with_header(self, name: str, value: str) -> Delegated:  # noqa: ARG002
        """No-op: the origin's headers are already on the wire."""
        return self

    def with_headers(self, headers: Mapping[str, str]) -> Delegated:  # noqa: ARG002
        """No-op: the origin's headers are already on the wire."""
        return self

    def with_content_type(self, content_type: str) -> Delegated:  # noqa: ARG002
        """No-op: the origin chose its own content type."""
        return self
