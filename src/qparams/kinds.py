"""Field kinds and primitive value parsing.

Every field the keyed container can decode has a ``FieldKind``. The set is
closed: primitive kinds parse text with the converters in ``PARSERS``;
``DATE`` and ``DATETIME`` go through the configured date strategy.

Python has one ``int`` and one ``float``, so fixed widths are declared with
``Annotated`` aliases::

    @dataclass(frozen=True, slots=True)
    class Page:
        size: UInt8
        offset: Int64
        ratio: Float32
"""

import re
import struct
from collections.abc import Callable
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, get_args, get_origin


class FieldKind(Enum):
    """A decodable field type."""

    TEXT = "text"
    BOOL = "bool"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    DATE = "date"
    DATETIME = "datetime"

    @property
    def is_date(self) -> bool:
        return self in (FieldKind.DATE, FieldKind.DATETIME)


Int8 = Annotated[int, FieldKind.INT8]
Int16 = Annotated[int, FieldKind.INT16]
Int32 = Annotated[int, FieldKind.INT32]
Int64 = Annotated[int, FieldKind.INT64]
UInt = Annotated[int, FieldKind.UINT]
UInt8 = Annotated[int, FieldKind.UINT8]
UInt16 = Annotated[int, FieldKind.UINT16]
UInt32 = Annotated[int, FieldKind.UINT32]
UInt64 = Annotated[int, FieldKind.UINT64]
Float32 = Annotated[float, FieldKind.FLOAT32]

# Inclusive bounds for each integer kind; native INT/UINT are 64-bit
INT_BOUNDS: dict[FieldKind, tuple[int, int]] = {
    FieldKind.INT: (-(2**63), 2**63 - 1),
    FieldKind.INT8: (-(2**7), 2**7 - 1),
    FieldKind.INT16: (-(2**15), 2**15 - 1),
    FieldKind.INT32: (-(2**31), 2**31 - 1),
    FieldKind.INT64: (-(2**63), 2**63 - 1),
    FieldKind.UINT: (0, 2**64 - 1),
    FieldKind.UINT8: (0, 2**8 - 1),
    FieldKind.UINT16: (0, 2**16 - 1),
    FieldKind.UINT32: (0, 2**32 - 1),
    FieldKind.UINT64: (0, 2**64 - 1),
}

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")


def parse_text(value: str) -> str:
    return value


def parse_bool(value: str) -> bool:
    """Accept ``true``/``false`` in any case. Raises ``ValueError`` otherwise."""
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    msg = f"{value!r} is not 'true' or 'false'"
    raise ValueError(msg)


def parse_float(value: str) -> float:
    """Parse a float literal. No surrounding whitespace or ``_`` separators."""
    if value != value.strip() or "_" in value:
        msg = f"{value!r} is not a float literal"
        raise ValueError(msg)
    return float(value)


def parse_float32(value: str) -> float:
    """Parse a float and round it to single precision."""
    number = parse_float(value)
    try:
        return struct.unpack("f", struct.pack("f", number))[0]
    except OverflowError:
        msg = f"{value!r} is out of range for float32"
        raise ValueError(msg) from None


def _integer_parser(kind: FieldKind) -> Callable[[str], int]:
    low, high = INT_BOUNDS[kind]
    pattern = _SIGNED if low < 0 else _UNSIGNED

    def parse(value: str) -> int:
        if not pattern.fullmatch(value):
            msg = f"{value!r} is not a base-10 integer"
            raise ValueError(msg)
        number = int(value)
        if not low <= number <= high:
            msg = f"{value} is out of range for {kind.value}"
            raise ValueError(msg)
        return number

    return parse


# Primitive kind -> text parser. Each raises ValueError on bad input.
PARSERS: dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.TEXT: parse_text,
    FieldKind.BOOL: parse_bool,
    FieldKind.FLOAT32: parse_float32,
    FieldKind.FLOAT64: parse_float,
    **{kind: _integer_parser(kind) for kind in INT_BOUNDS},
}

# Plain annotation -> kind
_TYPE_KINDS: dict[Any, FieldKind] = {
    str: FieldKind.TEXT,
    bool: FieldKind.BOOL,
    int: FieldKind.INT,
    float: FieldKind.FLOAT64,
    datetime: FieldKind.DATETIME,
    date: FieldKind.DATE,
}


def kind_for(annotation: Any) -> FieldKind | None:
    """Resolve a field annotation to its kind, or ``None`` if unsupported.

    Accepts a ``FieldKind``, one of ``str``, ``bool``, ``int``, ``float``,
    ``date``, ``datetime``, or an ``Annotated`` alias such as ``UInt8``.
    Optional wrappers (``X | None``) are not unwrapped here.
    """
    if isinstance(annotation, FieldKind):
        return annotation
    if get_origin(annotation) is Annotated:
        base, *extras = get_args(annotation)
        for extra in extras:
            if isinstance(extra, FieldKind):
                return extra
        return kind_for(base)
    return _TYPE_KINDS.get(annotation)
