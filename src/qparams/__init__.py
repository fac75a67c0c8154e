"""qparams — decode URL query strings into typed Python values.

Turns ``?page=2&since=2023-01-13&verbose`` into a dataclass (or any type
with a ``from_query`` routine), coercing each field and failing with a
precise, typed error.

Basic usage::

    from dataclasses import dataclass
    from datetime import date

    from qparams import Formatted, QueryDecoder

    @dataclass(frozen=True, slots=True)
    class Listing:
        page: int
        verbose: bool = False
        since: date | None = None

    decoder = QueryDecoder(date_strategy=Formatted("yyyy-MM-dd"))
    listing = decoder.decode(Listing, "https://example.com/?page=2&verbose")
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Custom",
    "DataCorrupted",
    "DateStrategy",
    "DecodeError",
    "DecoderConfig",
    "DecodingSession",
    "FieldKind",
    "Float32",
    "Formatted",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "KeyNotFound",
    "KeyedContainer",
    "MissingConfiguration",
    "ParamMap",
    "QParamsError",
    "QueryDecodable",
    "QueryDecoder",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedOperation",
    "UnsupportedType",
    "parse_params",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "QueryDecoder": "qparams.decoder",
    "QueryDecodable": "qparams.decoder",
    "DecodingSession": "qparams.decoder",
    "KeyedContainer": "qparams.container",
    "DecoderConfig": "qparams.config",
    "Custom": "qparams.dates",
    "DateStrategy": "qparams.dates",
    "Formatted": "qparams.dates",
    "ParamMap": "qparams.http.query",
    "parse_params": "qparams.http.query",
    "FieldKind": "qparams.kinds",
    "Float32": "qparams.kinds",
    "Int8": "qparams.kinds",
    "Int16": "qparams.kinds",
    "Int32": "qparams.kinds",
    "Int64": "qparams.kinds",
    "UInt": "qparams.kinds",
    "UInt8": "qparams.kinds",
    "UInt16": "qparams.kinds",
    "UInt32": "qparams.kinds",
    "UInt64": "qparams.kinds",
    "QParamsError": "qparams.errors",
    "ConfigurationError": "qparams.errors",
    "DecodeError": "qparams.errors",
    "KeyNotFound": "qparams.errors",
    "DataCorrupted": "qparams.errors",
    "MissingConfiguration": "qparams.errors",
    "UnsupportedOperation": "qparams.errors",
    "UnsupportedType": "qparams.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import qparams`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
