"""Shared type aliases used across qparams modules."""

from collections.abc import Callable
from datetime import date
from typing import TypeAlias

# Query source: a query string or URL, as text or raw ASGI bytes
Source: TypeAlias = str | bytes

# Custom date conversion: raw value in, date (or None for "not a date") out
DateConverter: TypeAlias = Callable[[str], date | None]
