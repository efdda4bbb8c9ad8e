"""
Elasticsearch query tree.

Every node is an immutable dataclass; two trees built from the same
criteria compare equal.  ``to_dict()`` renders the query DSL shape for
inspection and tests; sending it over the wire is up to the caller.
"""

from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from search_criteria.exceptions import UnsupportedOperatorError


def _with_boost(body: dict[str, Any], boost: float | None) -> dict[str, Any]:
    if boost is not None:
        body["boost"] = boost
    return body


class Operator(str, Enum):
    """Boolean operator of ``query_string`` / ``match`` queries."""

    AND = "and"
    OR = "or"


class GeoShapeRelation(str, Enum):
    """Spatial relation of a ``geo_shape`` query."""

    INTERSECTS = "intersects"
    DISJOINT = "disjoint"
    WITHIN = "within"
    CONTAINS = "contains"

    @classmethod
    def parse(cls, name: str) -> GeoShapeRelation:
        """
        Look up a relation by name, case-insensitively.

        Raises:
            UnsupportedOperatorError: for an unknown relation.
        """
        try:
            return cls(str(getattr(name, "value", name)).lower())
        except ValueError:
            raise UnsupportedOperatorError(
                str(name), [member.value for member in cls], kind="geo relation"
            ) from None


class QueryNode(ABC):
    """Base of all query tree nodes."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        ...


# ---------------------------------------------------------------------------
# Compound
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoolQuery(QueryNode):
    must: tuple[QueryNode, ...] = ()
    should: tuple[QueryNode, ...] = ()
    must_not: tuple[QueryNode, ...] = ()
    filter: tuple[QueryNode, ...] = ()
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        for clause in ("must", "should", "must_not", "filter"):
            nodes = getattr(self, clause)
            if nodes:
                body[clause] = [node.to_dict() for node in nodes]
        return {"bool": _with_boost(body, self.boost)}


@dataclass(frozen=True)
class NestedQuery(QueryNode):
    path: str
    query: QueryNode
    score_mode: str | None = "avg"

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"path": self.path, "query": self.query.to_dict()}
        if self.score_mode is not None:
            body["score_mode"] = self.score_mode
        return {"nested": body}


@dataclass(frozen=True)
class InnerHits:
    name: str | None = None
    from_: int | None = None
    size: int | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.name is not None:
            body["name"] = self.name
        if self.from_ is not None:
            body["from"] = self.from_
        if self.size is not None:
            body["size"] = self.size
        return body


@dataclass(frozen=True)
class HasChildQuery(QueryNode):
    type: str
    query: QueryNode
    score_mode: str | None = None
    min_children: int | None = None
    max_children: int | None = None
    ignore_unmapped: bool | None = None
    inner_hits: InnerHits | None = None
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"type": self.type, "query": self.query.to_dict()}
        for name in ("score_mode", "min_children", "max_children", "ignore_unmapped"):
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        if self.inner_hits is not None:
            body["inner_hits"] = self.inner_hits.to_dict()
        return {"has_child": _with_boost(body, self.boost)}


@dataclass(frozen=True)
class HasParentQuery(QueryNode):
    parent_type: str
    query: QueryNode
    score: bool | None = None
    ignore_unmapped: bool | None = None
    inner_hits: InnerHits | None = None
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "parent_type": self.parent_type,
            "query": self.query.to_dict(),
        }
        if self.score is not None:
            body["score"] = self.score
        if self.ignore_unmapped is not None:
            body["ignore_unmapped"] = self.ignore_unmapped
        if self.inner_hits is not None:
            body["inner_hits"] = self.inner_hits.to_dict()
        return {"has_parent": _with_boost(body, self.boost)}


@dataclass(frozen=True)
class WrapperQuery(QueryNode):
    """Literal query text; base64-encoded when rendered."""

    source: str

    def to_dict(self) -> dict[str, Any]:
        encoded = base64.b64encode(self.source.encode("utf-8")).decode("ascii")
        return {"wrapper": {"query": encoded}}


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MatchAllQuery(QueryNode):
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"match_all": _with_boost({}, self.boost)}


@dataclass(frozen=True)
class ExistsQuery(QueryNode):
    field: str
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"exists": _with_boost({"field": self.field}, self.boost)}


@dataclass(frozen=True)
class WildcardQuery(QueryNode):
    field: str
    value: str
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        body = _with_boost({"wildcard": self.value}, self.boost)
        return {"wildcard": {self.field: body}}


@dataclass(frozen=True)
class QueryStringQuery(QueryNode):
    query: str
    fields: tuple[str, ...] = ()
    default_operator: Operator | None = None
    analyze_wildcard: bool | None = None
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"query": self.query}
        if self.fields:
            body["fields"] = list(self.fields)
        if self.default_operator is not None:
            body["default_operator"] = self.default_operator.value
        if self.analyze_wildcard is not None:
            body["analyze_wildcard"] = self.analyze_wildcard
        return {"query_string": _with_boost(body, self.boost)}


@dataclass(frozen=True)
class RangeQuery(QueryNode):
    field: str
    gt: Any = None
    gte: Any = None
    lt: Any = None
    lte: Any = None
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        for bound in ("gt", "gte", "lt", "lte"):
            value = getattr(self, bound)
            if value is not None:
                body[bound] = value
        return {"range": {self.field: _with_boost(body, self.boost)}}


@dataclass(frozen=True)
class FuzzyQuery(QueryNode):
    field: str
    value: str
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"fuzzy": {self.field: _with_boost({"value": self.value}, self.boost)}}


@dataclass(frozen=True)
class MatchQuery(QueryNode):
    field: str
    query: str
    operator: Operator | None = None
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"query": self.query}
        if self.operator is not None:
            body["operator"] = self.operator.value
        return {"match": {self.field: _with_boost(body, self.boost)}}


@dataclass(frozen=True)
class TermsQuery(QueryNode):
    field: str
    values: tuple[str | None, ...]
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"terms": _with_boost({self.field: list(self.values)}, self.boost)}


@dataclass(frozen=True)
class RegexpQuery(QueryNode):
    field: str
    value: str
    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"regexp": {self.field: _with_boost({"value": self.value}, self.boost)}}


# ---------------------------------------------------------------------------
# Geo
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeoLocation:
    """
    A location as sent to the engine.

    Exactly one representation is set: ``lat``/``lon``, ``geohash`` or
    ``text`` (``"lat,lon"``).
    """

    lat: float | None = None
    lon: float | None = None
    geohash: str | None = None
    text: str | None = None

    def to_value(self) -> Any:
        if self.lat is not None and self.lon is not None:
            return {"lat": self.lat, "lon": self.lon}
        return self.geohash if self.geohash is not None else self.text


@dataclass(frozen=True)
class GeoDistanceQuery(QueryNode):
    field: str
    location: GeoLocation
    distance: str
    distance_type: str = "plane"

    def to_dict(self) -> dict[str, Any]:
        return {
            "geo_distance": {
                self.field: self.location.to_value(),
                "distance": self.distance,
                "distance_type": self.distance_type,
            }
        }


@dataclass(frozen=True)
class GeoBoundingBoxQuery(QueryNode):
    field: str
    top_left: GeoLocation
    bottom_right: GeoLocation

    def to_dict(self) -> dict[str, Any]:
        return {
            "geo_bounding_box": {
                self.field: {
                    "top_left": self.top_left.to_value(),
                    "bottom_right": self.bottom_right.to_value(),
                }
            }
        }


@dataclass(frozen=True)
class GeoShapeQuery(QueryNode):
    field: str
    shape: Mapping[str, Any]
    relation: GeoShapeRelation = GeoShapeRelation.INTERSECTS

    def __post_init__(self) -> None:
        if not isinstance(self.shape, MappingProxyType):
            object.__setattr__(self, "shape", MappingProxyType(dict(self.shape)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "geo_shape": {
                self.field: {
                    "shape": dict(self.shape),
                    "relation": self.relation.value,
                }
            }
        }
