"""
Top-level query variants and parent/child relationship options.

``SearchQuery`` is a closed union: a criteria-based query, a literal
engine query string, or an already-native query tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from .criteria import Criteria


@dataclass(frozen=True)
class CriteriaQuery:
    """A query built from a :class:`Criteria` graph."""

    criteria: Criteria


@dataclass(frozen=True)
class StringQuery:
    """Literal engine query text, passed through without parsing."""

    source: str


@dataclass(frozen=True)
class NativeQuery:
    """
    An already-native query.

    Attributes:
        query: Native scoring query tree, returned unchanged.
        filter: Native post-filter tree.
        wrapped: An abstract query to dispatch when ``query`` is unset.
    """

    query: Any = None
    filter: Any = None
    wrapped: SearchQuery | None = None


SearchQuery = Union[CriteriaQuery, StringQuery, NativeQuery]


class ScoreMode(str, Enum):
    """How matching child/nested document scores roll up."""

    NONE = "none"
    AVG = "avg"
    MAX = "max"
    MIN = "min"
    SUM = "sum"


@dataclass(frozen=True)
class InnerHitsQuery:
    """Inner-hits request attached to a relationship query."""

    name: str | None = None
    from_: int | None = None
    size: int | None = None


@dataclass(frozen=True)
class HasChildQuery:
    """Value of a ``HAS_CHILD`` entry: parents whose children match ``query``."""

    type: str
    query: SearchQuery | Criteria
    score_mode: ScoreMode | None = None
    min_children: int | None = None
    max_children: int | None = None
    ignore_unmapped: bool | None = None
    inner_hits: InnerHitsQuery | None = None


@dataclass(frozen=True)
class HasParentQuery:
    """Value of a ``HAS_PARENT`` entry: children whose parent matches ``query``."""

    parent_type: str
    query: SearchQuery | Criteria
    score: bool | None = None
    ignore_unmapped: bool | None = None
    inner_hits: InnerHitsQuery | None = None
