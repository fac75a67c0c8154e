"""Immutable, case-insensitive query string parameters.

Implements ``Mapping[str, str | None]``. Keys are stored lowercase; a value
of ``None`` marks a flag key written without ``=`` (``?verbose``), which is
distinct from an empty value (``?verbose=``).
"""

import re
from collections.abc import Iterator, Mapping
from urllib.parse import unquote, urlsplit

from qparams._internal.types import Source

# Absolute URL, path, or "?query"; anything else is a bare query string
_URL_PREFIX = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*://|[/?]")


class ParamMap(Mapping[str, str | None]):
    """Immutable query string parameters.

    Attributes:
        _data: Lowercase key -> value (``None`` for flag keys).
        _raw: The query component the map was parsed from.

    Duplicate keys keep the last occurrence. Lookups lowercase the key,
    so ``params["Flag"]`` and ``params["flag"]`` are the same entry.
    """

    _data: dict[str, str | None]
    _raw: str

    __slots__ = ("_data", "_raw")

    def __init__(self, query: str = "") -> None:
        object.__setattr__(self, "_raw", query)
        object.__setattr__(self, "_data", _parse_pairs(query))

    @classmethod
    def parse(cls, source: Source) -> "ParamMap":
        """Build a map from a query string or a full URL.

        Bytes are decoded as latin-1, the encoding of an ASGI
        ``query_string``. Parsing never fails.
        """
        return cls(query_component(source))

    def __setattr__(self, name: str, value: object) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str | None:
        return self._data[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.items())
        return f"ParamMap({{{items}}})"

    @property
    def raw(self) -> str:
        """The query component this map was parsed from."""
        return self._raw

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the value for *key*, or *default* if missing.

        Flag keys return ``None`` regardless of *default*; use ``in`` to
        tell a flag from a missing key.
        """
        key = key.lower()
        if key in self._data:
            return self._data[key]
        return default

    def flags(self) -> frozenset[str]:
        """Return the keys given without a value."""
        return frozenset(k for k, v in self._data.items() if v is None)


def parse_params(source: Source) -> ParamMap:
    """Parse *source* into a ``ParamMap``. Shorthand for ``ParamMap.parse``."""
    return ParamMap.parse(source)


def query_component(source: Source) -> str:
    """Return the query component of a URL, or *source* itself if it is one.

    Absolute URLs, paths, and text starting with ``?`` are split with
    ``urlsplit`` and the fragment is dropped. Anything else is taken as a
    bare query string, so ``next=http://example.com`` survives untouched.
    """
    text = source.decode("latin-1") if isinstance(source, bytes) else source
    if _URL_PREFIX.match(text):
        return urlsplit(text).query
    return text


def _parse_pairs(query: str) -> dict[str, str | None]:
    data: dict[str, str | None] = {}
    for pair in query.split("&"):
        if not pair:
            continue
        key, sep, value = pair.partition("=")
        data[unquote(key).lower()] = unquote(value) if sep else None
    return data
