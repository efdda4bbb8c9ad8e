"""
Compile the filter entries of a criteria graph into a non-scoring tree.

Filter entries (geo predicates) never influence scoring; the result is
meant for a ``bool.filter`` clause or a post filter.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .nodes import BoolQuery
from .operators import DEFAULT_REGISTRY
from .resolution import resolve_field
from .strategy import CompileContext

if TYPE_CHECKING:
    from collections.abc import Sequence

    from search_criteria.criteria import Criteria
    from search_criteria.hooks import ResolutionHook

    from .nodes import QueryNode
    from .strategy import ElasticsearchOperatorRegistry

logger = logging.getLogger("search_criteria.filters")


class CriteriaFilterCompiler:
    """
    Build the filter tree of a criteria chain.

    For each chain node the fragments are its filter entries followed by
    the compiled filters of its sub-criteria.  An OR node contributes one
    ``bool.should`` of its fragments; a negating node contributes each
    fragment wrapped in its own ``bool.must_not``; any other node
    contributes the fragments as they are.  A single item is returned
    unwrapped, several are combined with ``bool.must``.
    """

    def __init__(
        self,
        registry: ElasticsearchOperatorRegistry | None = None,
        hooks: Sequence[ResolutionHook] | None = None,
        *,
        context: CompileContext | None = None,
    ) -> None:
        self._registry = registry or DEFAULT_REGISTRY
        self._hooks = tuple(hooks or ())
        self._context = context or CompileContext()

    def compile(self, criteria: Criteria) -> QueryNode | None:
        items: list[QueryNode] = []

        for node in criteria.criteria_chain:
            fragments = self._fragments(node)
            if not fragments:
                continue
            if node.is_or:
                items.append(BoolQuery(should=tuple(fragments)))
            elif node.negating:
                items.extend(BoolQuery(must_not=(fragment,)) for fragment in fragments)
            else:
                items.extend(fragments)

        if not items:
            return None
        logger.debug("Compiled %d filter item(s)", len(items))
        if len(items) == 1:
            return items[0]
        return BoolQuery(must=tuple(items))

    def _fragments(self, node: Criteria) -> list[QueryNode]:
        fragments: list[QueryNode] = []
        for entry in node.filter_entries:
            field = resolve_field(
                node.field, self._hooks, operator=entry.key, value=entry.value
            )
            fragments.append(
                self._registry.apply(entry.key, field, entry.value, None, self._context)
            )
        for sub in node.sub_criteria:
            compiled = self.compile(sub)
            if compiled is not None:
                fragments.append(compiled)
        return fragments
