"""Backend-agnostic search criteria model."""

from __future__ import annotations

from .criteria import Criteria, CriteriaEntry
from .exceptions import (
    CriteriaError,
    InvalidArgumentError,
    MissingFieldError,
    UnsupportedOperatorError,
    UnsupportedQueryTypeError,
    ValidationError,
)
from .factory import CriteriaFactory
from .field import Field, FieldType
from .geo import Box, Distance, GeoBox, GeoPoint, Metric, Point
from .hooks import HookResult, ResolutionContext, ResolutionHook
from .operators import (
    OPERATOR_CATALOG,
    OperationKey,
    OperatorContext,
    OperatorSpec,
    context_of,
    spec_for,
    validate_value,
)
from .query import (
    CriteriaQuery,
    HasChildQuery,
    HasParentQuery,
    InnerHitsQuery,
    NativeQuery,
    ScoreMode,
    SearchQuery,
    StringQuery,
)

__all__ = [
    "OPERATOR_CATALOG",
    "Box",
    "Criteria",
    "CriteriaEntry",
    "CriteriaError",
    "CriteriaFactory",
    "CriteriaQuery",
    "Distance",
    "Field",
    "FieldType",
    "GeoBox",
    "GeoPoint",
    "HasChildQuery",
    "HasParentQuery",
    "HookResult",
    "InnerHitsQuery",
    "InvalidArgumentError",
    "Metric",
    "MissingFieldError",
    "NativeQuery",
    "OperationKey",
    "OperatorContext",
    "OperatorSpec",
    "Point",
    "ResolutionContext",
    "ResolutionHook",
    "ScoreMode",
    "SearchQuery",
    "StringQuery",
    "UnsupportedOperatorError",
    "UnsupportedQueryTypeError",
    "ValidationError",
    "context_of",
    "spec_for",
    "validate_value",
]
