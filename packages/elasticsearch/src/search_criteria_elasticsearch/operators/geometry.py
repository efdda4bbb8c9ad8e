"""
Geo filter builders and operators.

Geo predicates are always compiled in filter context.  Locations are
accepted as ``GeoPoint``, ``Point``, GeoJSON points, ``"lat,lon"`` text
or geohashes; bounding-box geohash corners are decoded here so that the
engine only ever receives ``"lat,lon"`` corners.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from search_criteria import geohash
from search_criteria.exceptions import InvalidArgumentError
from search_criteria.geo import Box, Distance, GeoBox, GeoPoint, Point, to_geojson
from search_criteria.operators import OperationKey

from ..escaping import distance_to_text
from ..nodes import (
    GeoBoundingBoxQuery,
    GeoDistanceQuery,
    GeoLocation,
    GeoShapeQuery,
    GeoShapeRelation,
    QueryNode,
)
from ..strategy import ElasticsearchOperator

if TYPE_CHECKING:
    from ..resolution import ResolvedField
    from ..strategy import CompileContext


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def distance_filter(field: str, point: Any, distance: Any) -> GeoDistanceQuery:
    """
    Documents within *distance* of *point*.

    Raises:
        InvalidArgumentError: for an unusable point or distance.
        UnsupportedOperatorError: for a distance unit the engine lacks.
    """
    location = _location(point, field, OperationKey.WITHIN, allow_geohash=True)
    if isinstance(distance, Distance):
        if not math.isfinite(distance.value) or distance.value < 0:
            raise _invalid(
                "distance must be a finite, non-negative number, "
                f"got {distance.value}",
                field,
                OperationKey.WITHIN,
            )
        text = distance_to_text(distance)
    elif isinstance(distance, str) and distance.strip():
        text = distance.strip()
    else:
        raise _invalid(
            f"distance must be a Distance or text, got {type(distance).__name__}",
            field,
            OperationKey.WITHIN,
        )
    return GeoDistanceQuery(field, location, text, distance_type="plane")


def bounding_box_filter(field: str, values: Sequence[Any]) -> GeoBoundingBoxQuery:
    """
    Documents inside a box: one ``GeoBox`` / ``Box`` or two corners.

    Raises:
        InvalidArgumentError: for any other arity or shape.
    """
    if len(values) == 1:
        (box,) = values
        if isinstance(box, Box):
            try:
                box = GeoBox.from_box(box)
            except ValueError as exc:
                raise _invalid(
                    f"box corners out of range: {exc}", field, OperationKey.BBOX
                ) from exc
        if not isinstance(box, GeoBox):
            raise _invalid(
                f"single bounding box value must be a GeoBox or Box, "
                f"got {type(box).__name__}",
                field,
                OperationKey.BBOX,
            )
        return GeoBoundingBoxQuery(
            field,
            GeoLocation(lat=box.top_left.lat, lon=box.top_left.lon),
            GeoLocation(lat=box.bottom_right.lat, lon=box.bottom_right.lon),
        )
    if len(values) == 2:
        if sum(isinstance(value, str) for value in values) == 1:
            raise _invalid(
                "bounding box corners must both be points or both be text",
                field,
                OperationKey.BBOX,
            )
        top_left, bottom_right = (
            _location(value, field, OperationKey.BBOX, allow_geohash=False)
            for value in values
        )
        return GeoBoundingBoxQuery(field, top_left, bottom_right)
    raise _invalid(
        f"bounding box needs one box or two corners, got {len(values)} value(s)",
        field,
        OperationKey.BBOX,
    )


def geo_shape_filter(
    field: str, geometry: Any, relation: GeoShapeRelation | str
) -> GeoShapeQuery:
    """
    Documents whose shape relates to *geometry*.

    Raises:
        InvalidArgumentError: if *geometry* is not valid GeoJSON.
        UnsupportedOperatorError: for an unknown relation.
    """
    rel = GeoShapeRelation.parse(relation)
    try:
        shape = to_geojson(geometry)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(
            f"invalid GeoJSON geometry: {exc}", field=field, operator=rel.value
        ) from exc
    return GeoShapeQuery(field, shape, rel)


def _invalid(message: str, field: str, op: OperationKey) -> InvalidArgumentError:
    return InvalidArgumentError(message, field=field, operator=op.value)


def _check_lat_lon(text: str, field: str, op: OperationKey) -> None:
    parts = text.split(",")
    if len(parts) != 2:
        raise _invalid(f"{text!r} is not 'lat,lon' text", field, op)
    try:
        GeoPoint(lat=float(parts[0]), lon=float(parts[1]))
    except ValueError as exc:
        raise _invalid(f"{text!r} is not 'lat,lon' text: {exc}", field, op) from exc


def _location(
    value: Any, field: str, op: OperationKey, *, allow_geohash: bool
) -> GeoLocation:
    if isinstance(value, Point):
        try:
            value = GeoPoint.from_point(value)
        except ValueError as exc:
            raise _invalid(f"point out of range: {exc}", field, op) from exc
    if isinstance(value, GeoPoint):
        return GeoLocation(lat=value.lat, lon=value.lon)
    if isinstance(value, str):
        text = value.strip()
        if "," in text:
            _check_lat_lon(text, field, op)
            return GeoLocation(text=text)
        if geohash.is_geohash(text):
            if allow_geohash:
                return GeoLocation(geohash=text)
            return GeoLocation(text=geohash.to_lat_lon(text))
        raise _invalid(
            f"{value!r} is neither 'lat,lon' text nor a geohash", field, op
        )
    if (
        isinstance(value, Mapping)
        or hasattr(value, "__geo_interface__")
        or hasattr(value, "model_dump")
    ):
        try:
            shape = to_geojson(value)
        except (TypeError, ValueError) as exc:
            raise _invalid(f"invalid GeoJSON point: {exc}", field, op) from exc
        if shape.get("type") == "Point":
            lon, lat = shape["coordinates"][:2]
            return GeoLocation(lat=lat, lon=lon)
    raise _invalid(
        f"unsupported location type {type(value).__name__}", field, op
    )


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class WithinOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.WITHIN

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        point, distance = value
        return distance_filter(field.name, point, distance)


class BoundingBoxOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.BBOX

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return bounding_box_filter(field.name, value)


class _GeoShapeOperator(ElasticsearchOperator):
    relation: GeoShapeRelation

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return geo_shape_filter(field.name, value, self.relation)


class GeoIntersectsOperator(_GeoShapeOperator):
    relation = GeoShapeRelation.INTERSECTS

    @property
    def name(self) -> OperationKey:
        return OperationKey.GEO_INTERSECTS


class GeoIsDisjointOperator(_GeoShapeOperator):
    relation = GeoShapeRelation.DISJOINT

    @property
    def name(self) -> OperationKey:
        return OperationKey.GEO_IS_DISJOINT


class GeoWithinOperator(_GeoShapeOperator):
    relation = GeoShapeRelation.WITHIN

    @property
    def name(self) -> OperationKey:
        return OperationKey.GEO_WITHIN


class GeoContainsOperator(_GeoShapeOperator):
    relation = GeoShapeRelation.CONTAINS

    @property
    def name(self) -> OperationKey:
        return OperationKey.GEO_CONTAINS
