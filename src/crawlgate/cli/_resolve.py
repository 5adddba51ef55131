"""Origin import resolution: ``"module:attribute"`` strings to ASGI apps.

Used by ``crawlgate run`` to locate the storefront application the
gateway should sit in front of.
"""

import importlib
import inspect
from typing import Any


def resolve_origin(import_string: str) -> Any:
    """Resolve an import string to an ASGI application.

    Accepts ``"module:attribute"`` format. When the attribute portion is
    omitted, defaults to ``"app"`` (e.g. ``"storefront"`` resolves to
    ``storefront.app``).

    A plain function taking no arguments is treated as an app factory
    and called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not callable, or the factory fails.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if inspect.isfunction(obj) and not inspect.iscoroutinefunction(obj):
        if not inspect.signature(obj).parameters:
            try:
                obj = obj()
            except Exception as exc:
                msg = f"Factory function {import_string!r} raised an error: {exc}"
                raise TypeError(msg) from exc

    if not callable(obj):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not an ASGI application"
        raise TypeError(msg)

    return obj
