"""
Entry point turning any :data:`SearchQuery` variant into a query tree.

Criteria queries go through the compiler, literal query strings are
wrapped untouched, native queries are passed through.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from search_criteria.criteria import Criteria
from search_criteria.exceptions import UnsupportedQueryTypeError
from search_criteria.query import CriteriaQuery, NativeQuery, StringQuery

from .compiler import CriteriaQueryCompiler
from .nodes import MatchAllQuery, WrapperQuery

if TYPE_CHECKING:
    from search_criteria.query import SearchQuery

    from .nodes import QueryNode

logger = logging.getLogger("search_criteria.facade")

Normalizer = Callable[["SearchQuery"], "SearchQuery"]


class QueryDispatcher:
    """
    Dispatch search queries to the matching translation.

    The dispatcher is its compiler's sub-query callback: the embedded
    queries of ``HAS_CHILD`` / ``HAS_PARENT`` entries are dispatched like
    top-level queries, and one compiling to nothing becomes ``match_all``.

    Args:
        compiler: Criteria compiler to use; its registry and hooks are
            kept.
    """

    def __init__(self, compiler: CriteriaQueryCompiler | None = None) -> None:
        base = compiler or CriteriaQueryCompiler()
        self._compiler = base.with_subquery_compiler(self._compile_subquery)

    @property
    def compiler(self) -> CriteriaQueryCompiler:
        return self._compiler

    def dispatch(
        self,
        query: SearchQuery,
        normalize: Normalizer | None = None,
        *,
        include_filter: bool = True,
    ) -> QueryNode | None:
        """
        Translate *query* into a query tree.

        Args:
            query: The query to translate.
            normalize: Applied to *query* first (e.g. to map property names
                or default fields); returns the query to translate.
            include_filter: For criteria queries, attach the filter entries
                as the ``bool.filter`` clause.

        Raises:
            UnsupportedQueryTypeError: for anything but the known variants.
        """
        if normalize is not None:
            query = normalize(query)

        if isinstance(query, CriteriaQuery):
            logger.debug("Dispatching criteria query")
            return self._compiler.compile(query.criteria, include_filter=include_filter)
        if isinstance(query, StringQuery):
            logger.debug("Dispatching string query as wrapper query")
            return WrapperQuery(query.source)
        if isinstance(query, NativeQuery):
            if query.query is not None:
                logger.debug("Dispatching native query unchanged")
                return query.query
            if query.wrapped is not None:
                return self.dispatch(query.wrapped, include_filter=include_filter)
            return None
        raise UnsupportedQueryTypeError(type(query).__name__)

    def dispatch_filter(
        self,
        query: SearchQuery,
        normalize: Normalizer | None = None,
    ) -> QueryNode | None:
        """
        The post filter of *query*: the criteria filter tree, a native
        query's own filter, or ``None``.
        """
        if normalize is not None:
            query = normalize(query)

        if isinstance(query, CriteriaQuery):
            return self._compiler.compile_filter(query.criteria)
        if isinstance(query, StringQuery):
            return None
        if isinstance(query, NativeQuery):
            if query.filter is not None:
                return query.filter
            if query.wrapped is not None:
                return self.dispatch_filter(query.wrapped)
            return None
        raise UnsupportedQueryTypeError(type(query).__name__)

    def _compile_subquery(self, query: SearchQuery) -> QueryNode:
        if isinstance(query, Criteria):
            query = CriteriaQuery(query)
        compiled = self.dispatch(query)
        return compiled if compiled is not None else MatchAllQuery()
