"""qparams exception hierarchy.

Shared across the param store, keyed container, and decoder so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class QParamsError(Exception):
    """Base for all qparams-specific errors."""


class ConfigurationError(QParamsError):
    """Raised when decoder configuration is invalid.

    Typically raised when a ``DecoderConfig`` or ``Formatted`` strategy
    is created, never halfway through a decode call.
    """


@dataclass(frozen=True, slots=True)
class DecodeError(QParamsError):
    """A failure to decode one field of a query string.

    Raised by the keyed container and propagated unchanged through
    ``QueryDecoder.decode``. ``coding_path`` names the field location.
    """

    detail: str = ""
    coding_path: tuple[str, ...] = ()

    def __str__(self) -> str:
        if self.coding_path:
            return f"{'.'.join(self.coding_path)}: {self.detail}"
        return self.detail


class KeyNotFound(DecodeError):  # noqa: N818 — mirrors KeyError naming
    """A required key is not present in the query string."""

    def __init__(self, key: str, coding_path: tuple[str, ...] = ()) -> None:
        super().__init__(detail=f"No value found for key {key!r}", coding_path=coding_path)
        object.__setattr__(self, "key", key)

    key: str


class DataCorrupted(DecodeError):
    """A value is present but cannot be read as the requested type.

    Covers unparseable text, flag keys requested as non-boolean types,
    and dates rejected by the configured strategy.
    """

    def __init__(
        self,
        key: str,
        target: str,
        reason: str,
        coding_path: tuple[str, ...] = (),
    ) -> None:
        super().__init__(
            detail=f"Could not convert value for key {key!r} to {target}: {reason}",
            coding_path=coding_path,
        )
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "target", target)
        object.__setattr__(self, "reason", reason)

    key: str
    target: str
    reason: str


class MissingConfiguration(DecodeError):
    """A field needs configuration the decoder does not have.

    Raised when a date field is decoded before a date strategy is set.
    """

    def __init__(self, reason: str, coding_path: tuple[str, ...] = ()) -> None:
        super().__init__(detail=reason, coding_path=coding_path)


class UnsupportedOperation(DecodeError):
    """The query string model cannot express the requested shape.

    Sequences, bare scalars, and nested containers all end up here.
    """

    def __init__(self, reason: str, coding_path: tuple[str, ...] = ()) -> None:
        super().__init__(detail=reason, coding_path=coding_path)


class UnsupportedType(UnsupportedOperation):
    """A field's declared type has no query string decoding."""

    def __init__(self, target: object, coding_path: tuple[str, ...] = ()) -> None:
        name = getattr(target, "__name__", None) or repr(target)
        super().__init__(f"Decoding {name} from a query string is not supported", coding_path)
        object.__setattr__(self, "target", target)

    target: object
