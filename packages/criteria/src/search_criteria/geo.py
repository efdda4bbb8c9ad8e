"""
Geo value objects used as operator values.

``GeoPoint`` / ``GeoBox`` are geographic (lat/lon), ``Point`` / ``Box`` are
planar (x = longitude, y = latitude).  GeoJSON geometries are
``geojson_pydantic`` models; plain GeoJSON mappings and objects exposing
``__geo_interface__`` are accepted wherever a geometry is expected.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from geojson_pydantic.geometries import Geometry
from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator


class ValueObject(BaseModel):
    """Immutable model compared by value."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.model_dump() == other.model_dump()

    def __hash__(self) -> int:
        return hash(tuple(getattr(self, name) for name in type(self).model_fields))


class GeoPoint(ValueObject):
    """Geographic point in degrees."""

    lat: float
    lon: float

    @field_validator("lat")
    @classmethod
    def _check_lat(cls, value: float) -> float:
        if not -90.0 <= value <= 90.0:
            raise ValueError(f"latitude must be within [-90, 90], got {value}")
        return value

    @field_validator("lon")
    @classmethod
    def _check_lon(cls, value: float) -> float:
        if not -180.0 <= value <= 180.0:
            raise ValueError(f"longitude must be within [-180, 180], got {value}")
        return value

    @classmethod
    def from_point(cls, point: Point) -> GeoPoint:
        return cls(lat=point.y, lon=point.x)

    def to_text(self) -> str:
        return f"{self.lat},{self.lon}"


class Point(ValueObject):
    """Planar point; ``x`` is the longitude and ``y`` the latitude."""

    x: float
    y: float


class GeoBox(ValueObject):
    """Geographic bounding box given by its top-left and bottom-right corners."""

    top_left: GeoPoint
    bottom_right: GeoPoint

    @classmethod
    def from_box(cls, box: Box) -> GeoBox:
        """Convert a planar box; its first corner is the top-left one."""
        return cls(
            top_left=GeoPoint.from_point(box.first),
            bottom_right=GeoPoint.from_point(box.second),
        )


class Box(ValueObject):
    """Planar box spanned by two corner points."""

    first: Point
    second: Point


class Metric(str, Enum):
    """Distance units."""

    KILOMETERS = "kilometers"
    MILES = "miles"
    NEUTRAL = "neutral"


class Distance(ValueObject):
    """A distance value with its unit."""

    value: float
    metric: Metric = Metric.KILOMETERS


# ---------------------------------------------------------------------------
# GeoJSON
# ---------------------------------------------------------------------------

_GEOMETRY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Geometry)


def to_geojson(geometry: Any) -> dict[str, Any]:
    """
    Return *geometry* as a plain, validated GeoJSON mapping.

    Accepts ``geojson_pydantic`` models (or any pydantic model dumping to
    GeoJSON), objects exposing ``__geo_interface__`` and mappings.

    Raises:
        TypeError: if *geometry* has none of these shapes.
        pydantic.ValidationError: if the data is not a valid geometry.
    """
    if isinstance(geometry, BaseModel):
        data: Any = geometry.model_dump(exclude_none=True)
    elif hasattr(geometry, "__geo_interface__"):
        data = dict(geometry.__geo_interface__)
    elif isinstance(geometry, Mapping):
        data = dict(geometry)
    else:
        raise TypeError(f"not a GeoJSON geometry: {type(geometry).__name__}")

    model = _GEOMETRY_ADAPTER.validate_python(data)
    result: dict[str, Any] = model.model_dump(mode="json", exclude_none=True)
    return result
