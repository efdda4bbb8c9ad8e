"""Text operators: wildcards, expressions, fuzzy, match and regexp."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from search_criteria.operators import OperationKey

from ..escaping import escape, to_text
from ..nodes import (
    FuzzyQuery,
    MatchQuery,
    Operator,
    QueryNode,
    QueryStringQuery,
    RegexpQuery,
)
from ..strategy import ElasticsearchOperator

if TYPE_CHECKING:
    from ..resolution import ResolvedField
    from ..strategy import CompileContext


class _WildcardOperator(ElasticsearchOperator):
    """``query_string`` with wildcards around the escaped value."""

    prefix = ""
    suffix = ""

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return QueryStringQuery(
            query=f"{self.prefix}{escape(to_text(value))}{self.suffix}",
            fields=(field.name,),
            analyze_wildcard=True,
            boost=boost,
        )


class ContainsOperator(_WildcardOperator):
    prefix = "*"
    suffix = "*"

    @property
    def name(self) -> OperationKey:
        return OperationKey.CONTAINS


class StartsWithOperator(_WildcardOperator):
    suffix = "*"

    @property
    def name(self) -> OperationKey:
        return OperationKey.STARTS_WITH


class EndsWithOperator(_WildcardOperator):
    prefix = "*"

    @property
    def name(self) -> OperationKey:
        return OperationKey.ENDS_WITH


class ExpressionOperator(ElasticsearchOperator):
    """Raw query-string syntax, passed through unescaped."""

    @property
    def name(self) -> OperationKey:
        return OperationKey.EXPRESSION

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return QueryStringQuery(query=to_text(value), fields=(field.name,), boost=boost)


class FuzzyOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.FUZZY

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return FuzzyQuery(field.name, escape(to_text(value)), boost=boost)


class MatchesOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.MATCHES

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return MatchQuery(field.name, to_text(value), Operator.OR, boost=boost)


class MatchesAllOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.MATCHES_ALL

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return MatchQuery(field.name, to_text(value), Operator.AND, boost=boost)


class RegexpOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.REGEXP

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return RegexpQuery(field.name, to_text(value), boost=boost)
