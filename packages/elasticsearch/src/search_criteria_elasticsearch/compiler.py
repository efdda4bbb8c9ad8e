"""
Compile a criteria graph into an Elasticsearch ``bool`` query tree.

Uses the strategy pattern: each operator is an isolated class in
``operators/``, registered in an ``ElasticsearchOperatorRegistry``.
:class:`CriteriaQueryCompiler` walks the criteria chain and delegates
leaf compilation to the registry.

Chain semantics
---------------
The first node producing a fragment anchors the query.  Every later
fragment is placed by its own node's flags: ``should`` for OR nodes,
``must_not`` for negating nodes, ``must`` otherwise.  Sub-criteria of a
node are compiled recursively and placed the same way, after the chain.
Finally the anchor goes to the front of ``should`` when that is the only
populated clause, otherwise to the front of ``must_not`` (negated anchor)
or ``must``.

Hooks
-----
Pass ``ResolutionHook`` callables to rename or re-type fields before any
predicate is built (see :mod:`search_criteria_elasticsearch.resolution`).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from search_criteria.criteria import Criteria
from search_criteria.exceptions import UnsupportedQueryTypeError
from search_criteria.query import CriteriaQuery

from .filters import CriteriaFilterCompiler
from .nodes import BoolQuery, MatchAllQuery, NestedQuery
from .operators import DEFAULT_REGISTRY
from .resolution import resolve_field
from .strategy import CompileContext

if TYPE_CHECKING:
    from collections.abc import Sequence

    from search_criteria.hooks import ResolutionHook
    from search_criteria.query import SearchQuery

    from .nodes import QueryNode
    from .strategy import ElasticsearchOperatorRegistry, SubqueryCompiler

logger = logging.getLogger("search_criteria.compiler")


class CriteriaQueryCompiler:
    """
    Criteria to query tree compiler.

    Args:
        registry: Operator registry; defaults to ``DEFAULT_REGISTRY``.
        hooks: Field resolution hooks, run in order.
        subquery_compiler: Compiles the embedded queries of ``HAS_CHILD`` /
            ``HAS_PARENT`` entries.  Defaults to compiling criteria queries
            with this compiler.

    The compiler holds no mutable state; one instance can be shared
    between threads.
    """

    def __init__(
        self,
        registry: ElasticsearchOperatorRegistry | None = None,
        hooks: Sequence[ResolutionHook] | None = None,
        subquery_compiler: SubqueryCompiler | None = None,
    ) -> None:
        self._registry = registry or DEFAULT_REGISTRY
        self._hooks = tuple(hooks or ())
        self._context = CompileContext(subquery_compiler or self._compile_embedded)
        self._filters = CriteriaFilterCompiler(
            self._registry, self._hooks, context=self._context
        )

    @property
    def registry(self) -> ElasticsearchOperatorRegistry:
        return self._registry

    def with_subquery_compiler(
        self, subquery_compiler: SubqueryCompiler
    ) -> CriteriaQueryCompiler:
        """A compiler sharing this one's registry and hooks."""
        return CriteriaQueryCompiler(self._registry, self._hooks, subquery_compiler)

    # -- public API -------------------------------------------------------

    def compile(
        self, criteria: Criteria, *, include_filter: bool = False
    ) -> QueryNode | None:
        """
        Compile the scoring part of *criteria*.

        Args:
            criteria: Any node of the chain; the whole chain is compiled.
            include_filter: Also attach the filter tree as the non-scoring
                ``filter`` clause.  A ``match_all`` is added to ``must``
                when nothing else scores, so the query still matches.

        Returns:
            A ``BoolQuery``, or ``None`` if the criteria produce nothing.

        Raises:
            MissingFieldError: entries on a node without a field.
            InvalidArgumentError: a value that does not fit its operator.
            UnsupportedOperatorError: an operator without a strategy.
        """
        must: list[QueryNode] = []
        should: list[QueryNode] = []
        must_not: list[QueryNode] = []

        first: QueryNode | None = None
        negate_first = False
        chain = criteria.criteria_chain

        for node in chain:
            fragment = self._query_for_entries(node)
            if fragment is None:
                continue
            if first is None:
                first, negate_first = fragment, node.negating
                continue
            _place(node, fragment, must, should, must_not)

        for node in chain:
            for sub in node.sub_criteria:
                sub_query = self.compile(sub)
                if sub_query is not None:
                    _place(node, sub_query, must, should, must_not)

        if first is not None:
            if should and not must and not must_not:
                should.insert(0, first)
            elif negate_first:
                must_not.insert(0, first)
            else:
                must.insert(0, first)

        filter_node = self._filters.compile(criteria) if include_filter else None

        if not (must or should or must_not):
            if filter_node is None:
                logger.debug(
                    "Criteria chain of %d node(s) compiled to nothing", len(chain)
                )
                return None
            must.append(MatchAllQuery())

        logger.debug(
            "Compiled criteria chain of %d node(s): must=%d should=%d must_not=%d "
            "filter=%s",
            len(chain),
            len(must),
            len(should),
            len(must_not),
            filter_node is not None,
        )
        return BoolQuery(
            must=tuple(must),
            should=tuple(should),
            must_not=tuple(must_not),
            filter=(filter_node,) if filter_node is not None else (),
        )

    def compile_filter(self, criteria: Criteria) -> QueryNode | None:
        """Compile only the filter (non-scoring) part of *criteria*."""
        return self._filters.compile(criteria)

    # -- internals --------------------------------------------------------

    def _query_for_entries(self, node: Criteria) -> QueryNode | None:
        if not node.query_entries:
            return None

        single = len(node.query_entries) == 1
        fragments: list[QueryNode] = []
        path: str | None = None
        for index, entry in enumerate(node.query_entries):
            field = resolve_field(
                node.field, self._hooks, operator=entry.key, value=entry.value
            )
            if index == 0:
                path = field.path
            fragments.append(
                self._registry.apply(
                    entry.key,
                    field,
                    entry.value,
                    node.boost if single else None,
                    self._context,
                )
            )

        fragment = (
            fragments[0]
            if single
            else BoolQuery(must=tuple(fragments), boost=node.boost)
        )
        if path:
            fragment = NestedQuery(path, fragment, score_mode="avg")
        if node.is_or and node.negating:
            fragment = BoolQuery(must_not=(fragment,))
        return fragment

    def _compile_embedded(self, query: SearchQuery) -> QueryNode | None:
        if isinstance(query, Criteria):
            return self.compile(query, include_filter=True)
        if isinstance(query, CriteriaQuery):
            return self.compile(query.criteria, include_filter=True)
        raise UnsupportedQueryTypeError(type(query).__name__)


def _place(
    node: Criteria,
    fragment: QueryNode,
    must: list[QueryNode],
    should: list[QueryNode],
    must_not: list[QueryNode],
) -> None:
    if node.is_or:
        should.append(fragment)
    elif node.negating:
        must_not.append(fragment)
    else:
        must.append(fragment)
