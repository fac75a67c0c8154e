"""Query decoder — turns a query string into a typed value.

The decoder holds configuration only. Each ``decode`` call parses the
source into a fresh ``ParamMap``, opens a ``DecodingSession`` over it, and
hands the session to the target type's field-extraction routine::

    class Keys(StrEnum):
        PAGE = "page"
        SINCE = "since"

    @dataclass(frozen=True, slots=True)
    class Listing:
        page: int
        since: date | None

        @classmethod
        def from_query(cls, session: DecodingSession) -> "Listing":
            c = session.keyed_container(Keys)
            return cls(
                page=c.decode_int(Keys.PAGE),
                since=c.decode_optional(date, Keys.SINCE),
            )

    decoder = QueryDecoder(date_strategy=Formatted("yyyy-MM-dd"))
    listing = decoder.decode(Listing, "https://example.com/?page=2")

Plain dataclasses without ``from_query`` are bound field by field (see
``qparams.extraction``). The first failing field aborts the call; there are
no partial results.

Configuration may change between calls but not while a call is running;
each call works from a ``DecoderConfig`` snapshot taken when it starts.
"""

import dataclasses
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, Self, runtime_checkable

from qparams._internal.asgi import Scope, query_string_from_scope
from qparams._internal.types import Source
from qparams.config import DecoderConfig
from qparams.container import KeyedContainer
from qparams.dates import DateStrategy
from qparams.errors import DecodeError, UnsupportedOperation, UnsupportedType
from qparams.extraction import extract_dataclass
from qparams.http.query import ParamMap

logger = logging.getLogger("qparams.decoder")


@runtime_checkable
class QueryDecodable(Protocol):
    """A type that builds itself from a decoding session."""

    @classmethod
    def from_query(cls, session: "DecodingSession") -> Self: ...


class DecodingSession:
    """State for one decode call: the params, the path, the config snapshot.

    Discarded when the call returns. Containers it hands out read the same
    ``ParamMap`` and never outlive it.
    """

    __slots__ = ("coding_path", "config", "params")

    def __init__(
        self,
        params: ParamMap,
        config: DecoderConfig,
        coding_path: tuple[str, ...] = (),
    ) -> None:
        self.params = params
        self.config = config
        self.coding_path = coding_path

    @property
    def user_info(self) -> Mapping[str, Any]:
        """Caller context from the decoder, read-only."""
        return self.config.user_info

    def keyed_container[K: Enum](self, keys: type[K]) -> KeyedContainer[K]:
        """Return a container over this call's params for the key enum *keys*."""
        return KeyedContainer(keys, self.params, self.coding_path, self.config.date_strategy)

    def unkeyed_container(self) -> Any:
        msg = "Query strings cannot be decoded as a sequence"
        raise UnsupportedOperation(msg, self.coding_path)

    def single_value_container(self) -> Any:
        msg = "Query strings cannot be decoded as a single value"
        raise UnsupportedOperation(msg, self.coding_path)


class QueryDecoder:
    """Decodes query strings into typed values. Reusable across calls.

    Args:
        config: Initial configuration. ``date_strategy`` and ``user_info``
            override the matching config fields when given.
    """

    def __init__(
        self,
        config: DecoderConfig | None = None,
        *,
        date_strategy: DateStrategy | None = None,
        user_info: Mapping[str, Any] | None = None,
    ) -> None:
        config = config or DecoderConfig()
        if date_strategy is None:
            date_strategy = config.date_strategy
        self.date_strategy: DateStrategy | None = date_strategy
        if user_info is None:
            user_info = config.user_info
        self.user_info: dict[str, Any] = dict(user_info)

    def __repr__(self) -> str:
        return f"QueryDecoder(date_strategy={self.date_strategy!r})"

    @property
    def config(self) -> DecoderConfig:
        """A frozen snapshot of the current configuration.

        Raises ``ConfigurationError`` if ``date_strategy`` was set to
        something that is not a date strategy.
        """
        return DecoderConfig(date_strategy=self.date_strategy, user_info=self.user_info)

    def decode[T](self, target: type[T], source: Source) -> T:
        """Decode *source* (a query string or URL) into an instance of *target*.

        Raises the first ``DecodeError`` any field produces, unchanged.
        """
        params = ParamMap.parse(source)
        session = DecodingSession(params, self.config)
        name = getattr(target, "__name__", repr(target))
        logger.debug("Decoding %s from %d params", name, len(params))
        try:
            return self._run(target, session)
        except DecodeError as exc:
            logger.debug("Decoding %s failed: %s", name, exc)
            raise

    def decode_scope[T](self, target: type[T], scope: Scope) -> T:
        """Decode the query string of an ASGI HTTP scope into *target*."""
        return self.decode(target, query_string_from_scope(scope))

    def _run[T](self, target: type[T], session: DecodingSession) -> T:
        if isinstance(target, type) and issubclass(target, QueryDecodable):
            return target.from_query(session)  # type: ignore[return-value]
        if isinstance(target, type) and dataclasses.is_dataclass(target):
            return extract_dataclass(target, session.keyed_container)
        raise UnsupportedType(target, session.coding_path)
