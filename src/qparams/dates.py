"""Date decoding strategies.

A date strategy tells the decoder how to turn query string text into a
date. Two variants, matched exhaustively by the keyed container:

- ``Formatted`` parses with a fixed pattern. The pattern is either a
  ``strptime`` directive string (``"%Y-%m-%d"``) or a Unicode date pattern
  (``"yyyy-MM-dd"``), translated once when the strategy is created.
- ``Custom`` hands the text to a caller-supplied function.

Usage::

    decoder = QueryDecoder()
    decoder.date_strategy = Formatted("yyyy-MM-dd")
    decoder.date_strategy = Custom(datetime.fromisoformat)
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime

from qparams._internal.types import DateConverter
from qparams.errors import ConfigurationError

# Unicode pattern letter run -> strptime directive
_PATTERN_DIRECTIVES: dict[str, str] = {
    "yyyy": "%Y",
    "YYYY": "%Y",
    "uuuu": "%Y",
    "y": "%Y",
    "yy": "%y",
    "YY": "%y",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "M": "%m",
    "dd": "%d",
    "d": "%d",
    "DDD": "%j",
    "EEEE": "%A",
    "EEE": "%a",
    "E": "%a",
    "HH": "%H",
    "H": "%H",
    "hh": "%I",
    "h": "%I",
    "a": "%p",
    "mm": "%M",
    "m": "%M",
    "ss": "%S",
    "s": "%S",
    "Z": "%z",
    "ZZ": "%z",
    "ZZZ": "%z",
    "ZZZZZ": "%z",
    "X": "%z",
    "XX": "%z",
    "XXX": "%z",
    "xx": "%z",
    "xxx": "%z",
}

_PATTERN_TOKEN = re.compile(r"'[^']*'|([A-Za-z])\1*")

# "%%" is matched first so an escaped percent is never read as "%Y"
_YEAR_DIRECTIVE = re.compile(r"%%|%Y")


def translate_pattern(pattern: str) -> str:
    """Translate a Unicode date pattern into a ``strptime`` directive string.

    Patterns that already contain ``%`` are returned unchanged. Quoted
    text (``'T'``) is copied literally and ``''`` yields a single quote.

    Raises ``ConfigurationError`` for pattern letters with no directive.
    """
    if "%" in pattern:
        return pattern

    parts: list[str] = []
    pos = 0
    for match in _PATTERN_TOKEN.finditer(pattern):
        parts.append(pattern[pos : match.start()])
        token = match.group(0)
        if token.startswith("'"):
            parts.append(token[1:-1] or "'")
        elif token[0] == "S":
            parts.append("%f")
        else:
            directive = _PATTERN_DIRECTIVES.get(token)
            if directive is None:
                msg = f"Unsupported date pattern field {token!r} in {pattern!r}"
                raise ConfigurationError(msg)
            parts.append(directive)
        pos = match.end()
    parts.append(pattern[pos:])
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class Formatted:
    """Parse dates with a fixed pattern.

    Attributes:
        format: The pattern as given by the caller.
        directive: The equivalent ``strptime`` directive string.
    """

    format: str
    directive: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "directive", translate_pattern(self.format))

    def parse(self, text: str) -> datetime:
        """Parse *text*. Raises ``ValueError`` if it does not match."""
        return datetime.strptime(text, self.directive)

    def format_value(self, value: date) -> str:
        """Render *value* with the same pattern ``parse`` reads.

        The year is zero-padded to four digits, which ``strptime("%Y")``
        requires and platform ``strftime`` does not always produce.
        """
        year = f"{value.year:04d}"
        directive = _YEAR_DIRECTIVE.sub(
            lambda m: year if m.group(0) == "%Y" else "%%", self.directive
        )
        return value.strftime(directive)


@dataclass(frozen=True, slots=True)
class Custom:
    """Parse dates with a caller-supplied function.

    The function receives the raw value and returns a ``date``/``datetime``.
    Returning ``None`` or raising counts as a failed conversion.
    """

    convert: DateConverter

    def parse(self, text: str) -> date:
        """Run the converter. Raises ``ValueError`` when it returns ``None``."""
        value = self.convert(text)
        if value is None:
            msg = f"converter returned no date for {text!r}"
            raise ValueError(msg)
        return value


DateStrategy = Formatted | Custom
