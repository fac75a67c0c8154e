"""Keyed container — typed, key-addressed access to one decode call's params.

A container is bound to a field-key enumeration: an ``Enum`` whose members
name the target type's fields. A member's key name is its value when that
is a string, otherwise its member name::

    class Keys(StrEnum):
        INT_PARAM = "intParam"
        FLAG = "flag"

Lookups are case-insensitive. Every operation reads the same immutable
``ParamMap``, so repeated reads of a key return the same result.
"""

import logging
from datetime import date, datetime, time
from enum import Enum
from typing import Any, overload

from qparams.dates import DateStrategy
from qparams.errors import (
    DataCorrupted,
    DecodeError,
    KeyNotFound,
    MissingConfiguration,
    UnsupportedOperation,
    UnsupportedType,
)
from qparams.http.query import ParamMap
from qparams.kinds import PARSERS, FieldKind, kind_for

logger = logging.getLogger("qparams.container")


def key_name(key: Enum) -> str:
    """Return the query string name of a field key."""
    return key.value if isinstance(key.value, str) else key.name


class KeyedContainer[K: Enum]:
    """Field access for one target type over one ``ParamMap``.

    Created by ``DecodingSession.keyed_container``; never outlives the call
    that created it.
    """

    __slots__ = ("_by_name", "_date_strategy", "coding_path", "keys", "params")

    def __init__(
        self,
        keys: type[K],
        params: ParamMap,
        coding_path: tuple[str, ...] = (),
        date_strategy: DateStrategy | None = None,
    ) -> None:
        self.keys = keys
        self.params = params
        self.coding_path = coding_path
        self._date_strategy = date_strategy
        self._by_name: dict[str, K] = {key_name(member).lower(): member for member in keys}

    def __repr__(self) -> str:
        return f"KeyedContainer({self.keys.__name__}, {self.params!r})"

    # -- Presence ------------------------------------------------------------

    def contains(self, key: K) -> bool:
        """True if *key* appears in the query string, with or without a value."""
        return self._lookup_name(key) in self.params

    def all_keys(self) -> frozenset[K]:
        """Every query string key that names a member of the key enumeration."""
        return frozenset(self._by_name[name] for name in self.params if name in self._by_name)

    def decode_is_absent(self, key: K) -> bool:
        """True if *key* is missing, a flag without value, or an empty value."""
        return not self.params.get(self._lookup_name(key))

    # -- Primitives ----------------------------------------------------------

    def decode(self, kind: FieldKind, key: K) -> Any:
        """Decode *key* as *kind*.

        Raises:
            KeyNotFound: The key is not in the query string.
            DataCorrupted: The value cannot be read as *kind*. A flag key
                counts as ``True`` for ``BOOL`` and is corrupt otherwise.
            MissingConfiguration: A date kind with no date strategy set.
        """
        if kind.is_date:
            value = self.decode_date(key)
            return value.date() if kind is FieldKind.DATE else value

        raw = self._require(key)
        name = key_name(key)
        if raw is None:
            if kind is FieldKind.BOOL:
                return True
            raise DataCorrupted(name, kind.value, "flag key has no value", self._path(key))
        try:
            return PARSERS[kind](raw)
        except ValueError as exc:
            raise DataCorrupted(name, kind.value, str(exc), self._path(key)) from exc

    def decode_str(self, key: K) -> str:
        return self.decode(FieldKind.TEXT, key)

    def decode_bool(self, key: K) -> bool:
        return self.decode(FieldKind.BOOL, key)

    def decode_float(self, key: K) -> float:
        return self.decode(FieldKind.FLOAT64, key)

    def decode_float32(self, key: K) -> float:
        return self.decode(FieldKind.FLOAT32, key)

    def decode_int(self, key: K) -> int:
        return self.decode(FieldKind.INT, key)

    def decode_int8(self, key: K) -> int:
        return self.decode(FieldKind.INT8, key)

    def decode_int16(self, key: K) -> int:
        return self.decode(FieldKind.INT16, key)

    def decode_int32(self, key: K) -> int:
        return self.decode(FieldKind.INT32, key)

    def decode_int64(self, key: K) -> int:
        return self.decode(FieldKind.INT64, key)

    def decode_uint(self, key: K) -> int:
        return self.decode(FieldKind.UINT, key)

    def decode_uint8(self, key: K) -> int:
        return self.decode(FieldKind.UINT8, key)

    def decode_uint16(self, key: K) -> int:
        return self.decode(FieldKind.UINT16, key)

    def decode_uint32(self, key: K) -> int:
        return self.decode(FieldKind.UINT32, key)

    def decode_uint64(self, key: K) -> int:
        return self.decode(FieldKind.UINT64, key)

    # -- Dates ---------------------------------------------------------------

    def decode_date(self, key: K, strategy: DateStrategy | None = None) -> datetime:
        """Decode *key* with *strategy*, or the decoder's configured one.

        ``Custom`` converters that return a plain ``date`` are widened to
        midnight of that day.
        """
        if strategy is None:
            strategy = self._date_strategy
        name = key_name(key)
        if strategy is None:
            msg = f"No date strategy configured for decoding key {name!r}"
            raise MissingConfiguration(msg, self._path(key))

        raw = self._require(key)
        if raw is None:
            raise DataCorrupted(name, "date", "flag key has no value", self._path(key))
        try:
            value = strategy.parse(raw)
        except Exception as exc:
            raise DataCorrupted(name, "date", str(exc), self._path(key)) from exc
        if not isinstance(value, datetime):
            if not isinstance(value, date):
                reason = f"strategy returned {type(value).__name__}, not a date"
                raise DataCorrupted(name, "date", reason, self._path(key))
            value = datetime.combine(value, time.min)
        return value

    # -- Generic -------------------------------------------------------------

    def decode_typed(self, target: Any, key: K) -> Any:
        """Decode *key* as the field type *target*.

        *target* is resolved with ``kind_for``: a plain type such as ``int``
        or ``date``, an ``Annotated`` width alias, or a ``FieldKind``. Date
        types need a configured date strategy. Anything else raises
        ``UnsupportedType``; structured values and sequences have no
        query string form.
        """
        kind = kind_for(target)
        if kind is None:
            raise UnsupportedType(target, self._path(key))
        return self.decode(kind, key)

    @overload
    def decode_optional(self, target: FieldKind, key: K) -> Any | None: ...
    @overload
    def decode_optional[T](self, target: type[T], key: K) -> T | None: ...

    def decode_optional(self, target: Any, key: K) -> Any | None:
        """Like ``decode_typed``, but any ``DecodeError`` becomes ``None``.

        Swallows every failure, not only a missing key: ``?count=abc``
        decoded as an optional int is ``None``.
        """
        try:
            return self.decode_typed(target, key)
        except DecodeError as exc:
            logger.debug("Optional field %r decoded as None: %s", key_name(key), exc)
            return None

    # -- Unsupported shapes --------------------------------------------------

    def nested_keyed_container(self, keys: type[Enum], key: K) -> "KeyedContainer[Any]":
        msg = "Query strings have no nested keyed values"
        raise UnsupportedOperation(msg, self._path(key))

    def nested_unkeyed_container(self, key: K) -> Any:
        msg = "Query strings have no sequence values"
        raise UnsupportedOperation(msg, self._path(key))

    def parent_decoder(self, key: K | None = None) -> Any:
        msg = "Query strings have no parent decoder"
        raise UnsupportedOperation(msg, self._path(key) if key is not None else self.coding_path)

    # -- Internals -----------------------------------------------------------

    def _lookup_name(self, key: K) -> str:
        # Shared by contains() and decode_is_absent() so both normalize alike
        return key_name(key).lower()

    def _require(self, key: K) -> str | None:
        name = self._lookup_name(key)
        if name not in self.params:
            raise KeyNotFound(key_name(key), self._path(key))
        return self.params[name]

    def _path(self, key: K) -> tuple[str, ...]:
        return (*self.coding_path, key_name(key))
