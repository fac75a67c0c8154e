"""Typed binding of query parameters to dataclasses.

Gives plain dataclasses a field-extraction routine, so they decode without
writing ``from_query`` by hand. Used by ``QueryDecoder`` when the target is
a dataclass.

Binding rules, per field in declaration order:

- **Key**: the field name, or ``field(metadata={"query": "otherName"})``.
  Matching is case-insensitive.
- **Defaulted**: the default when the key is absent, optional or not.
- **Optional** (``X | None``): decoded with ``decode_optional``, so a
  malformed value (or a missing one, with no default) becomes ``None``.
- **Defaulted, not optional**: a present key is decoded strictly.
- **Required**: decoded strictly; failures propagate.

Field types resolve through ``kind_for``: ``str``, ``int``, ``float``,
``bool``, ``date``, ``datetime`` and the width aliases in ``qparams.kinds``.
Anything else raises ``UnsupportedType`` when the field is decoded.
"""

import dataclasses
import types
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import cache
from typing import Any, Union, get_args, get_origin, get_type_hints

from qparams.container import KeyedContainer

QUERY_KEY = "query"


@dataclass(frozen=True, slots=True)
class FieldPlan:
    """How one dataclass field is read from the query string."""

    name: str
    key: Enum
    annotation: Any
    optional: bool
    has_default: bool


@dataclass(frozen=True, slots=True)
class BindingPlan:
    """The field plans of one dataclass plus its generated key enumeration."""

    keys: type[Enum]
    fields: tuple[FieldPlan, ...]


def extract_dataclass[T](
    cls: type[T],
    open_container: Callable[[type[Enum]], KeyedContainer[Any]],
) -> T:
    """Create a dataclass instance from a keyed container.

    Args:
        cls: A dataclass type to instantiate.
        open_container: Returns a container for a key enumeration, normally
            ``DecodingSession.keyed_container``.

    Returns:
        A new instance of *cls*. Fields left out fall back to their defaults.
    """
    plan = binding_plan(cls)
    container = open_container(plan.keys)
    kwargs: dict[str, Any] = {}

    for f in plan.fields:
        if f.has_default and not container.contains(f.key):
            continue
        if f.optional:
            kwargs[f.name] = container.decode_optional(f.annotation, f.key)
        else:
            kwargs[f.name] = container.decode_typed(f.annotation, f.key)

    return cls(**kwargs)


@cache
def binding_plan(cls: type) -> BindingPlan:
    """Build (once per class) the plan ``extract_dataclass`` follows."""
    hints = get_type_hints(cls, include_extras=True)
    init_fields = [f for f in dataclasses.fields(cls) if f.init]
    # Positional member names; field names may clash with Enum internals
    keys = Enum(  # type: ignore[misc]
        f"{cls.__name__}Keys",
        [(f"F{i}", f.metadata.get(QUERY_KEY, f.name)) for i, f in enumerate(init_fields)],
    )

    plans = []
    for i, f in enumerate(init_fields):
        annotation, optional = _unwrap_optional(hints[f.name])
        has_default = (
            f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        )
        plans.append(FieldPlan(f.name, keys[f"F{i}"], annotation, optional, has_default))

    return BindingPlan(keys=keys, fields=tuple(plans))


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Split ``X | None`` into ``(X, True)``; other annotations pass through."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) < len(get_args(annotation)) and len(args) == 1:
            return args[0], True
    return annotation, False
