"""Set operators: in, not_in, between."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from search_criteria.operators import OperationKey

from ..escaping import or_query_string, to_term_list
from ..nodes import BoolQuery, QueryNode, QueryStringQuery, RangeQuery, TermsQuery
from ..strategy import ElasticsearchOperator
from .standard import range_bound

if TYPE_CHECKING:
    from ..resolution import ResolvedField
    from ..strategy import CompileContext


class InOperator(ElasticsearchOperator):
    """
    Keyword fields get an exact ``terms`` query, analysed fields a
    quoted ``query_string`` alternative.
    """

    @property
    def name(self) -> OperationKey:
        return OperationKey.IN

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        if field.is_keyword:
            terms = TermsQuery(field.name, to_term_list(value))
            return BoolQuery(must=(terms,), boost=boost)
        return QueryStringQuery(
            query=or_query_string(value), fields=(field.name,), boost=boost
        )


class NotInOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.NOT_IN

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        if field.is_keyword:
            terms = TermsQuery(field.name, to_term_list(value))
            return BoolQuery(must_not=(terms,), boost=boost)
        return QueryStringQuery(
            query=f"NOT({or_query_string(value)})",
            fields=(field.name,),
            boost=boost,
        )


class BetweenOperator(ElasticsearchOperator):
    """Inclusive range; a ``None`` bound is left open."""

    @property
    def name(self) -> OperationKey:
        return OperationKey.BETWEEN

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        lower, upper = value
        return RangeQuery(
            field.name,
            gte=range_bound(lower),
            lte=range_bound(upper),
            boost=boost,
        )
