"""ASGI scope access.

Only the query string is read; everything else in the scope is ignored.
"""

from collections.abc import MutableMapping
from typing import Any, TypeAlias

from qparams.errors import UnsupportedOperation

# Raw ASGI connection scope
Scope: TypeAlias = MutableMapping[str, Any]


def query_string_from_scope(scope: Scope) -> bytes:
    """Return the raw ``query_string`` of an HTTP or WebSocket scope.

    Raises ``UnsupportedOperation`` for scope types that carry no query
    string (``lifespan``).
    """
    scope_type = scope.get("type", "http")
    if scope_type not in ("http", "websocket"):
        msg = f"ASGI scope type {scope_type!r} has no query string"
        raise UnsupportedOperation(msg)
    return bytes(scope.get("query_string", b""))
