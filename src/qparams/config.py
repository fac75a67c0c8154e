"""Decoder configuration.

DecoderConfig is a frozen dataclass: a snapshot taken at the start of each
decode call, so every field of that call sees the same settings.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from qparams.dates import Custom, DateStrategy, Formatted
from qparams.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class DecoderConfig:
    """Decoder configuration. Immutable after creation.

    Both fields are optional. Set a date strategy before decoding any
    date-typed field::

        config = DecoderConfig(date_strategy=Formatted("yyyy-MM-dd"))
    """

    # Dates: None means date fields fail with MissingConfiguration
    date_strategy: DateStrategy | None = None

    # Caller context, passed through to field-extraction routines untouched
    user_info: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.date_strategy is not None and not isinstance(
            self.date_strategy, (Formatted, Custom)
        ):
            msg = (
                "date_strategy must be Formatted or Custom, "
                f"got {type(self.date_strategy).__name__}"
            )
            raise ConfigurationError(msg)
        object.__setattr__(self, "user_info", MappingProxyType(dict(self.user_info)))
