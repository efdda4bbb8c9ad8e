"""
Elasticsearch backend for search criteria.

Compiles :class:`~search_criteria.Criteria` graphs into immutable query
trees (``bool`` / leaf predicates) mirroring the Elasticsearch query DSL.

Usage::

    from search_criteria import Criteria
    from search_criteria_elasticsearch import compile_query

    tree = compile_query(Criteria.where("name").is_("Smith"))
    tree.to_dict()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .compiler import CriteriaQueryCompiler
from .escaping import escape
from .facade import QueryDispatcher
from .filters import CriteriaFilterCompiler
from .nodes import (
    BoolQuery,
    ExistsQuery,
    FuzzyQuery,
    GeoBoundingBoxQuery,
    GeoDistanceQuery,
    GeoLocation,
    GeoShapeQuery,
    GeoShapeRelation,
    HasChildQuery,
    HasParentQuery,
    InnerHits,
    MatchAllQuery,
    MatchQuery,
    NestedQuery,
    Operator,
    QueryNode,
    QueryStringQuery,
    RangeQuery,
    RegexpQuery,
    TermsQuery,
    WildcardQuery,
    WrapperQuery,
)
from .operators import DEFAULT_REGISTRY, build_default_registry
from .resolution import FieldMappingHook, ResolvedField, resolve_field
from .strategy import CompileContext, ElasticsearchOperator, ElasticsearchOperatorRegistry

if TYPE_CHECKING:
    from search_criteria.criteria import Criteria
    from search_criteria.query import SearchQuery

    from .facade import Normalizer

_DISPATCHER = QueryDispatcher()


def compile_query(
    criteria: Criteria, *, include_filter: bool = False
) -> QueryNode | None:
    """Compile *criteria* with the default registry."""
    return _DISPATCHER.compiler.compile(criteria, include_filter=include_filter)


def compile_filter(criteria: Criteria) -> QueryNode | None:
    """Compile the filter entries of *criteria* with the default registry."""
    return _DISPATCHER.compiler.compile_filter(criteria)


def dispatch(
    query: SearchQuery, normalize: Normalizer | None = None
) -> QueryNode | None:
    """Translate any search query variant with the default dispatcher."""
    return _DISPATCHER.dispatch(query, normalize)


__all__ = [
    "DEFAULT_REGISTRY",
    "BoolQuery",
    "CompileContext",
    "CriteriaFilterCompiler",
    "CriteriaQueryCompiler",
    "ElasticsearchOperator",
    "ElasticsearchOperatorRegistry",
    "ExistsQuery",
    "FieldMappingHook",
    "FuzzyQuery",
    "GeoBoundingBoxQuery",
    "GeoDistanceQuery",
    "GeoLocation",
    "GeoShapeQuery",
    "GeoShapeRelation",
    "HasChildQuery",
    "HasParentQuery",
    "InnerHits",
    "MatchAllQuery",
    "MatchQuery",
    "NestedQuery",
    "Operator",
    "QueryDispatcher",
    "QueryNode",
    "QueryStringQuery",
    "RangeQuery",
    "RegexpQuery",
    "ResolvedField",
    "TermsQuery",
    "WildcardQuery",
    "WrapperQuery",
    "build_default_registry",
    "compile_filter",
    "compile_query",
    "dispatch",
    "escape",
    "resolve_field",
]
