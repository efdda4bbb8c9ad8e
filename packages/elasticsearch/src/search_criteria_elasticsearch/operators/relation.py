"""Parent/child relationship operators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from search_criteria.criteria import Criteria
from search_criteria.exceptions import InvalidArgumentError
from search_criteria.operators import OperationKey
from search_criteria.query import CriteriaQuery

from ..escaping import to_text
from ..nodes import HasChildQuery, HasParentQuery, InnerHits, MatchAllQuery, QueryNode
from ..strategy import ElasticsearchOperator

if TYPE_CHECKING:
    from search_criteria.query import InnerHitsQuery, SearchQuery

    from ..resolution import ResolvedField
    from ..strategy import CompileContext


def compile_embedded(
    query: SearchQuery | Criteria,
    context: CompileContext,
    *,
    field: str,
    operator: OperationKey,
) -> QueryNode:
    """Compile the embedded query; nothing to match means match everything."""
    if context.subquery_compiler is None:
        raise InvalidArgumentError(
            "no sub-query compiler configured for relationship queries",
            field=field,
            operator=operator.value,
        )
    if isinstance(query, Criteria):
        query = CriteriaQuery(query)
    compiled = context.subquery_compiler(query)
    return compiled if compiled is not None else MatchAllQuery()


def inner_hits(spec: InnerHitsQuery | None) -> InnerHits | None:
    if spec is None:
        return None
    return InnerHits(name=spec.name, from_=spec.from_, size=spec.size)


class HasChildOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.HAS_CHILD

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return HasChildQuery(
            type=value.type,
            query=compile_embedded(
                value.query, context, field=field.name, operator=self.name
            ),
            score_mode=None if value.score_mode is None else to_text(value.score_mode),
            min_children=value.min_children,
            max_children=value.max_children,
            ignore_unmapped=value.ignore_unmapped,
            inner_hits=inner_hits(value.inner_hits),
            boost=boost,
        )


class HasParentOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.HAS_PARENT

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return HasParentQuery(
            parent_type=value.parent_type,
            query=compile_embedded(
                value.query, context, field=field.name, operator=self.name
            ),
            score=value.score,
            ignore_unmapped=value.ignore_unmapped,
            inner_hits=inner_hits(value.inner_hits),
            boost=boost,
        )
