"""Equality and range operators."""

from __future__ import annotations

import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from search_criteria.operators import OperationKey

from ..escaping import escape, to_text
from ..nodes import Operator, QueryNode, QueryStringQuery, RangeQuery
from ..strategy import ElasticsearchOperator

if TYPE_CHECKING:
    from ..resolution import ResolvedField
    from ..strategy import CompileContext


def range_bound(value: Any) -> Any:
    """Numbers stay numbers; dates and enums are rendered as text."""
    if isinstance(value, datetime.date | datetime.time | Enum):
        return to_text(value)
    return value


class EqualsOperator(ElasticsearchOperator):
    @property
    def name(self) -> OperationKey:
        return OperationKey.EQUALS

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return QueryStringQuery(
            query=escape(to_text(value)),
            fields=(field.name,),
            default_operator=Operator.AND,
            boost=boost,
        )


class _RangeOperator(ElasticsearchOperator):
    bound: str

    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        return RangeQuery(field.name, boost=boost, **{self.bound: range_bound(value)})


class LessOperator(_RangeOperator):
    bound = "lt"

    @property
    def name(self) -> OperationKey:
        return OperationKey.LESS


class LessEqualOperator(_RangeOperator):
    bound = "lte"

    @property
    def name(self) -> OperationKey:
        return OperationKey.LESS_EQUAL


class GreaterOperator(_RangeOperator):
    bound = "gt"

    @property
    def name(self) -> OperationKey:
        return OperationKey.GREATER


class GreaterEqualOperator(_RangeOperator):
    bound = "gte"

    @property
    def name(self) -> OperationKey:
        return OperationKey.GREATER_EQUAL
