"""
Elasticsearch operator implementations and default registry.

Usage::

    from search_criteria_elasticsearch.operators import DEFAULT_REGISTRY

    node = DEFAULT_REGISTRY.apply(OperationKey.EQUALS, field, "value")
"""

from __future__ import annotations

from search_criteria.operators import OperationKey

from ..strategy import ElasticsearchOperatorRegistry
from .geometry import (
    BoundingBoxOperator,
    GeoContainsOperator,
    GeoIntersectsOperator,
    GeoIsDisjointOperator,
    GeoWithinOperator,
    WithinOperator,
    bounding_box_filter,
    distance_filter,
    geo_shape_filter,
)
from .null import (
    EmptyOperator,
    ExistsOperator,
    NotEmptyOperator,
)
from .relation import (
    HasChildOperator,
    HasParentOperator,
)
from .set import (
    BetweenOperator,
    InOperator,
    NotInOperator,
)
from .standard import (
    EqualsOperator,
    GreaterEqualOperator,
    GreaterOperator,
    LessEqualOperator,
    LessOperator,
)
from .string import (
    ContainsOperator,
    EndsWithOperator,
    ExpressionOperator,
    FuzzyOperator,
    MatchesAllOperator,
    MatchesOperator,
    RegexpOperator,
    StartsWithOperator,
)


def build_default_registry() -> ElasticsearchOperatorRegistry:
    """Create a registry with all built-in Elasticsearch operators."""
    registry = ElasticsearchOperatorRegistry()
    registry.register_all(
        # Presence
        ExistsOperator(),
        EmptyOperator(),
        NotEmptyOperator(),
        # Text
        EqualsOperator(),
        ContainsOperator(),
        StartsWithOperator(),
        EndsWithOperator(),
        ExpressionOperator(),
        FuzzyOperator(),
        MatchesOperator(),
        MatchesAllOperator(),
        RegexpOperator(),
        # Range
        LessOperator(),
        LessEqualOperator(),
        GreaterOperator(),
        GreaterEqualOperator(),
        BetweenOperator(),
        # Set
        InOperator(),
        NotInOperator(),
        # Relationships
        HasChildOperator(),
        HasParentOperator(),
        # Geo
        WithinOperator(),
        BoundingBoxOperator(),
        GeoIntersectsOperator(),
        GeoIsDisjointOperator(),
        GeoWithinOperator(),
        GeoContainsOperator(),
    )
    return registry


DEFAULT_REGISTRY: ElasticsearchOperatorRegistry = build_default_registry()

_missing = DEFAULT_REGISTRY.missing(OperationKey)
if _missing:
    raise RuntimeError(
        "Operators without an Elasticsearch strategy: "
        + ", ".join(sorted(key.value for key in _missing))
    )

__all__ = [
    "DEFAULT_REGISTRY",
    "ElasticsearchOperatorRegistry",
    "bounding_box_filter",
    "build_default_registry",
    "distance_filter",
    "geo_shape_filter",
]
