"""
Elasticsearch operator compilation strategy.

Provides the ``ElasticsearchOperator`` interface and a registry keyed by
:class:`OperationKey`.  The compilers never switch on operators; they look
the strategy up here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from search_criteria.exceptions import UnsupportedOperatorError
from search_criteria.operators import OperationKey, validate_value

if TYPE_CHECKING:
    from search_criteria.query import SearchQuery

    from .nodes import QueryNode
    from .resolution import ResolvedField

logger = logging.getLogger("search_criteria.registry")

SubqueryCompiler = Callable[["SearchQuery"], "QueryNode | None"]


@dataclass(frozen=True)
class CompileContext:
    """
    Collaborators available to operator strategies.

    Attributes:
        subquery_compiler: Compiles the embedded query of relationship
            operators (``HAS_CHILD`` / ``HAS_PARENT``).
    """

    subquery_compiler: SubqueryCompiler | None = None


class ElasticsearchOperator(ABC):
    """
    Strategy interface for compiling one criteria operator into a
    query tree node.
    """

    @property
    @abstractmethod
    def name(self) -> OperationKey:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(
        self,
        field: ResolvedField,
        value: Any,
        boost: float | None,
        context: CompileContext,
    ) -> QueryNode:
        """
        Build the predicate for *field*.

        Args:
            field: The resolved field.
            value: The entry value, already checked against the catalog.
            boost: Node boost, ``None`` when unset.
            context: Compiler collaborators.
        """
        ...


class ElasticsearchOperatorRegistry:
    """Registry of ``ElasticsearchOperator`` instances keyed by operator."""

    def __init__(self) -> None:
        self._operators: dict[OperationKey, ElasticsearchOperator] = {}

    def register(self, operator: ElasticsearchOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: ElasticsearchOperator) -> None:
        for op in operators:
            self.register(op)

    def unregister(self, name: OperationKey) -> None:
        self._operators.pop(name, None)

    def get(self, name: OperationKey) -> ElasticsearchOperator | None:
        return self._operators.get(name)

    def has(self, name: OperationKey) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[OperationKey]:
        return set(self._operators.keys())

    def missing(self, keys: Iterable[OperationKey]) -> set[OperationKey]:
        """Keys from *keys* with no registered strategy."""
        return {key for key in keys if key not in self._operators}

    def apply(
        self,
        name: OperationKey,
        field: ResolvedField,
        value: Any,
        boost: float | None = None,
        context: CompileContext | None = None,
    ) -> QueryNode:
        """
        Validate *value* and apply the strategy registered for *name*.

        Raises:
            UnsupportedOperatorError: If the operator is not registered.
            InvalidArgumentError: If *value* does not fit the operator.
        """
        op = self.get(name)
        if op is None:
            raise UnsupportedOperatorError(
                str(getattr(name, "value", name)),
                [key.value for key in self._operators],
            )
        validate_value(name, value, field.name)
        logger.debug("Applying %s to field %s", op.name.value, field.name)
        return op.apply(field, value, boost, context or CompileContext())
