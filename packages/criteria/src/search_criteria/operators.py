"""
Operator catalog.

Every :class:`OperationKey` is described by exactly one
:class:`OperatorSpec`: the context it is evaluated in (scoring query or
non-scoring filter), its value arity and the value shape it accepts.

The catalog is checked when this module is imported; an operator added to
the enum without a catalog entry fails at startup rather than being
silently ignored by the compilers.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from .exceptions import InvalidArgumentError, UnsupportedOperatorError


class OperationKey(str, Enum):
    """Supported criteria operators."""

    # Value-less checks
    EXISTS = "exists"
    EMPTY = "empty"
    NOT_EMPTY = "not_empty"

    # Text
    EQUALS = "equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    EXPRESSION = "expression"
    FUZZY = "fuzzy"
    MATCHES = "matches"
    MATCHES_ALL = "matches_all"
    REGEXP = "regexp"

    # Ranges
    LESS = "less"
    LESS_EQUAL = "less_equal"
    GREATER = "greater"
    GREATER_EQUAL = "greater_equal"
    BETWEEN = "between"

    # Sets
    IN = "in"
    NOT_IN = "not_in"

    # Relationships
    HAS_CHILD = "has_child"
    HAS_PARENT = "has_parent"

    # Geo (filter context)
    WITHIN = "within"
    BBOX = "bbox"
    GEO_INTERSECTS = "geo_intersects"
    GEO_IS_DISJOINT = "geo_is_disjoint"
    GEO_WITHIN = "geo_within"
    GEO_CONTAINS = "geo_contains"


class OperatorContext(str, Enum):
    """Where an operator is evaluated."""

    QUERY = "query"
    FILTER = "filter"


class ValueShape(str, Enum):
    """Accepted value shapes."""

    NONE = "none"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    GEOJSON = "geojson"
    HAS_CHILD = "has_child"
    HAS_PARENT = "has_parent"


@dataclass(frozen=True)
class OperatorSpec:
    """Context, arity and value shape of one operator."""

    context: OperatorContext
    shape: ValueShape
    min_arity: int
    max_arity: int | None

    @property
    def takes_value(self) -> bool:
        return self.shape is not ValueShape.NONE


_Q = OperatorContext.QUERY
_F = OperatorContext.FILTER

OPERATOR_CATALOG: Mapping[OperationKey, OperatorSpec] = MappingProxyType(
    {
        OperationKey.EXISTS: OperatorSpec(_Q, ValueShape.NONE, 0, 0),
        OperationKey.EMPTY: OperatorSpec(_Q, ValueShape.NONE, 0, 0),
        OperationKey.NOT_EMPTY: OperatorSpec(_Q, ValueShape.NONE, 0, 0),
        OperationKey.EQUALS: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.CONTAINS: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.STARTS_WITH: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.ENDS_WITH: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.EXPRESSION: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.FUZZY: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.MATCHES: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.MATCHES_ALL: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.REGEXP: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.LESS: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.LESS_EQUAL: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.GREATER: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.GREATER_EQUAL: OperatorSpec(_Q, ValueShape.SCALAR, 1, 1),
        OperationKey.BETWEEN: OperatorSpec(_Q, ValueShape.SEQUENCE, 2, 2),
        OperationKey.IN: OperatorSpec(_Q, ValueShape.SEQUENCE, 0, None),
        OperationKey.NOT_IN: OperatorSpec(_Q, ValueShape.SEQUENCE, 0, None),
        OperationKey.HAS_CHILD: OperatorSpec(_Q, ValueShape.HAS_CHILD, 1, 1),
        OperationKey.HAS_PARENT: OperatorSpec(_Q, ValueShape.HAS_PARENT, 1, 1),
        OperationKey.WITHIN: OperatorSpec(_F, ValueShape.SEQUENCE, 2, 2),
        OperationKey.BBOX: OperatorSpec(_F, ValueShape.SEQUENCE, 1, 2),
        OperationKey.GEO_INTERSECTS: OperatorSpec(_F, ValueShape.GEOJSON, 1, 1),
        OperationKey.GEO_IS_DISJOINT: OperatorSpec(_F, ValueShape.GEOJSON, 1, 1),
        OperationKey.GEO_WITHIN: OperatorSpec(_F, ValueShape.GEOJSON, 1, 1),
        OperationKey.GEO_CONTAINS: OperatorSpec(_F, ValueShape.GEOJSON, 1, 1),
    }
)


def _check_catalog() -> None:
    missing = [key.name for key in OperationKey if key not in OPERATOR_CATALOG]
    if missing:
        raise RuntimeError(
            f"Operators without a catalog entry: {', '.join(missing)}"
        )


_check_catalog()

_VALID_KEYS: tuple[str, ...] = tuple(key.value for key in OperationKey)


# ---------------------------------------------------------------------------
# Look-up
# ---------------------------------------------------------------------------


def to_operation_key(op: OperationKey | str) -> OperationKey:
    """Coerce an operator name (case-insensitive) to an :class:`OperationKey`."""
    if isinstance(op, OperationKey):
        return op
    try:
        return OperationKey(str(op).lower())
    except ValueError:
        raise UnsupportedOperatorError(str(op), _VALID_KEYS) from None


def spec_for(op: OperationKey | str) -> OperatorSpec:
    """Return the catalog entry for *op*."""
    return OPERATOR_CATALOG[to_operation_key(op)]


def context_of(op: OperationKey | str) -> OperatorContext:
    return spec_for(op).context


def query_operators() -> frozenset[OperationKey]:
    """Operators evaluated in scoring (query) context."""
    return frozenset(k for k, s in OPERATOR_CATALOG.items() if s.context is _Q)


def filter_operators() -> frozenset[OperationKey]:
    """Operators evaluated in non-scoring (filter) context."""
    return frozenset(k for k, s in OPERATOR_CATALOG.items() if s.context is _F)


# ---------------------------------------------------------------------------
# Value validation
# ---------------------------------------------------------------------------


def is_sequence(value: Any) -> bool:
    """True for ordered, non-text sequences (list, tuple, ...)."""
    return isinstance(value, Sequence) and not isinstance(
        value, str | bytes | bytearray
    )


def is_geojson(value: Any) -> bool:
    """True for GeoJSON mappings, GeoJSON models and geo-interface objects."""
    if hasattr(value, "__geo_interface__") or hasattr(value, "model_dump"):
        return True
    return isinstance(value, Mapping) and "type" in value


def validate_value(op: OperationKey | str, value: Any, field_name: str | None) -> None:
    """
    Check *value* against the arity and shape declared for *op*.

    Raises:
        InvalidArgumentError: naming the field and the operator.
        UnsupportedOperatorError: if *op* is unknown.
    """
    key = to_operation_key(op)
    spec = OPERATOR_CATALOG[key]

    def fail(message: str) -> InvalidArgumentError:
        return InvalidArgumentError(message, field=field_name, operator=key.value)

    if spec.shape is ValueShape.NONE:
        return

    if value is None:
        raise fail("value must not be None")

    if spec.shape is ValueShape.SCALAR:
        if is_sequence(value) or isinstance(value, Mapping | set | frozenset):
            raise fail(
                f"value must be a single value, got {type(value).__name__}"
            )
        return

    if spec.shape is ValueShape.SEQUENCE:
        if not is_sequence(value):
            raise fail(f"value must be a sequence, got {type(value).__name__}")
        size = len(value)
        if size < spec.min_arity or (
            spec.max_arity is not None and size > spec.max_arity
        ):
            expected = (
                str(spec.min_arity)
                if spec.min_arity == spec.max_arity
                else f"{spec.min_arity}..{spec.max_arity or 'n'}"
            )
            raise fail(f"value must have {expected} element(s), got {size}")
        return

    if spec.shape is ValueShape.GEOJSON:
        if not is_geojson(value):
            raise fail(
                f"value must be a GeoJSON geometry, got {type(value).__name__}"
            )
        return

    # Relationship specs live beside the query variants.
    from .query import HasChildQuery, HasParentQuery

    expected_type = (
        HasChildQuery if spec.shape is ValueShape.HAS_CHILD else HasParentQuery
    )
    if not isinstance(value, expected_type):
        raise fail(
            f"value must be a {expected_type.__name__}, got {type(value).__name__}"
        )
