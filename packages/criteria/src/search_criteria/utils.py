"""
Value casting for criteria read from dicts / JSON.

``value_type`` names follow the mapping type tags of :class:`FieldType`
(``keyword``, ``long``, ``date`` ...) plus a few aliases.
"""

from __future__ import annotations

import datetime
import json
import uuid
from typing import Any

_STRING_TYPES = frozenset({"string", "str", "text", "keyword"})
_INT_TYPES = frozenset({"integer", "int", "long", "short"})
_FLOAT_TYPES = frozenset({"float", "double", "decimal", "numeric"})
_BOOL_TYPES = frozenset({"boolean", "bool"})


# ---------------------------------------------------------------------------
# List parsing
# ---------------------------------------------------------------------------


def parse_list_value(value: Any) -> list[Any]:
    """
    Parse a value into a list.

    Supports:
    - Python sequences (list, tuple)
    - Comma-separated strings: ``"val1, val2"``
    - Bracketed strings: ``"[val1, val2]"`` or ``"['val1', 'val2']"``
    """
    if isinstance(value, list | tuple):
        return list(value)
    if isinstance(value, str):
        content = value.strip()
        if content.startswith("[") and content.endswith("]"):
            content = content[1:-1].strip()
        if not content:
            return []
        return [v.strip().strip("'").strip('"') for v in content.split(",")]
    return [value]


# ---------------------------------------------------------------------------
# Value casting
# ---------------------------------------------------------------------------


def cast_value(value: Any, value_type: str | None = None) -> Any:
    """
    Cast *value* to the Python type named by *value_type*.

    Lists are cast item by item.  Without a *value_type* the value is
    returned unchanged; unknown types and values that fail to cast pass
    through as well, leaving the compiler to reject them.

    Supported *value_type* strings: ``string``, ``text``, ``keyword``,
    ``integer``, ``long``, ``short``, ``float``, ``double``, ``boolean``,
    ``date``, ``datetime``, ``uuid``, ``json``, ``list``, ``auto``.
    """
    if isinstance(value, list):
        return [cast_value(item, value_type) for item in value]
    if value_type is None or value is None:
        return value
    try:
        return _cast_explicit(value, value_type.lower())
    except (ValueError, TypeError):
        return value


def _cast_explicit(value: Any, vt: str) -> Any:
    if vt in _STRING_TYPES:
        return str(value)
    if vt in _INT_TYPES:
        return int(value)
    if vt in _FLOAT_TYPES:
        return float(value)
    if vt in _BOOL_TYPES:
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value)
    if vt == "date":
        if isinstance(value, datetime.date):
            return value
        return datetime.date.fromisoformat(str(value)[:10])
    if vt == "datetime":
        if isinstance(value, datetime.datetime):
            return value
        result = datetime.datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        if result.tzinfo is not None:
            result = result.astimezone(datetime.timezone.utc)
        return result
    if vt == "uuid":
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    if vt == "json":
        return value if isinstance(value, dict) else json.loads(str(value))
    if vt == "list":
        return parse_list_value(value)
    if vt == "auto":
        return _infer_auto(value) if isinstance(value, str) else value
    return value


def _infer_auto(value: str) -> Any:
    for caster in (int, float):
        try:
            return caster(value)
        except ValueError:
            continue
    low = value.lower()
    if low in ("true", "yes"):
        return True
    if low in ("false", "no"):
        return False
    return value
