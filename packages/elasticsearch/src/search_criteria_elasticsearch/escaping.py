"""Text rendering of criteria values for query strings and term lists."""

from __future__ import annotations

import datetime
import math
from enum import Enum
from typing import TYPE_CHECKING, Any

from search_criteria.exceptions import UnsupportedOperatorError
from search_criteria.geo import Metric

if TYPE_CHECKING:
    from collections.abc import Iterable

    from search_criteria.geo import Distance

# Characters with a meaning in the query-string syntax.
_SPECIAL = frozenset('\\+-!():^[]"{}~*?|&/')

_UNIT_SUFFIX = {Metric.KILOMETERS: "km", Metric.MILES: "mi"}


def escape(text: str) -> str:
    """
    Backslash-escape query-string syntax characters in *text*.

    Not idempotent: escaping an escaped string escapes the backslashes again.
    """
    return "".join(f"\\{char}" if char in _SPECIAL else char for char in text)


def to_text(value: Any) -> str:
    """Render a scalar value the way the engine parses it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime.date | datetime.time):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def distance_to_text(distance: Distance) -> str:
    """
    Render *distance* with its unit suffix (``"10km"``, ``"2.5mi"``).

    Raises:
        UnsupportedOperatorError: for units the engine cannot take
            (``Metric.NEUTRAL``).
    """
    suffix = _UNIT_SUFFIX.get(distance.metric)
    if suffix is None:
        raise UnsupportedOperatorError(
            str(getattr(distance.metric, "value", distance.metric)),
            [metric.value for metric in _UNIT_SUFFIX],
            kind="distance unit",
        )
    value = distance.value
    if math.isfinite(value) and value == int(value):
        return f"{int(value)}{suffix}"
    return f"{value}{suffix}"


def to_term_list(values: Iterable[Any]) -> tuple[str | None, ...]:
    """Render each value for a ``terms`` query; ``None`` stays ``None``."""
    return tuple(None if value is None else to_text(value) for value in values)


def or_query_string(values: Iterable[Any]) -> str:
    """Quote and escape each non-null value: ``"a" "b"``."""
    return " ".join(
        f'"{escape(to_text(value))}"' for value in values if value is not None
    )
