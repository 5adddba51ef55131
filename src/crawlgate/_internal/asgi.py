"""Typed ASGI definitions.

Raw ASGI callables as the gateway passes them around. Users never see
these; they interact with Request and Response.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]

# Any ASGI 3.0 application (the origin behind the gateway)
ASGIApp: TypeAlias = Callable[[Scope, Receive, Send], Awaitable[None]]
