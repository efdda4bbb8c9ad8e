"""Presence operators: exists, empty, not_empty."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from search_criteria.operators import OperationKey

from ..nodes import BoolQuery, ExistsQuery, QueryNode, WildcardQuery
from ..strategy import ElasticsearchOperator

if TYPE_CHECKING:
    from ..resolution import ResolvedField
    from ..strategy import CompileContext


class ExistsOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.EXISTS

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return ExistsQuery(field.name, boost=boost)


class EmptyOperator(ElasticsearchOperator):
    """The field is present but has no value."""

    @property
    def name(self) -> OperationKey:
        return OperationKey.EMPTY

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return BoolQuery(
            must=(ExistsQuery(field.name),),
            must_not=(WildcardQuery(field.name, "*"),),
            boost=boost,
        )


class NotEmptyOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.NOT_EMPTY

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return WildcardQuery(field.name, "*", boost=boost)
