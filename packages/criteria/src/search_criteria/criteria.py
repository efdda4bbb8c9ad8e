"""
Criteria: a backend-agnostic predicate chain.

A criteria graph is a chain of immutable nodes.  Each node names a field,
carries query (scoring) and filter (non-scoring) entries, and states how
it joins the nodes before it (``is_or`` / ``negating``).  Every fluent call
returns a new node; earlier nodes are never mutated, so a partially built
chain can be shared and extended in several directions.

Example::

    criteria = (
        Criteria.where("last_name").is_("Miller")
        .with_sub_criteria(
            Criteria().or_("first_name").is_("John").or_("first_name").is_("Jack")
        )
    )
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from .exceptions import ValidationError
from .field import Field
from .operators import OperationKey, OperatorContext, context_of, to_operation_key
from .query import CriteriaQuery, HasChildQuery, HasParentQuery, InnerHitsQuery

if TYPE_CHECKING:
    from .geo import Distance, GeoPoint, Point


@dataclass(frozen=True)
class CriteriaEntry:
    """One operator applied to the node's field."""

    key: OperationKey
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"op": self.key.value}
        if self.value is not None:
            data["val"] = _render_value(self.value)
        return data


@dataclass(frozen=True)
class Criteria:
    """
    One node of a criteria chain.

    Attributes:
        field: Field the entries apply to; ``None`` for grouping nodes.
        is_or: Join the previous nodes with OR.
        negating: Join the previous nodes with AND NOT.
        query_entries: Entries compiled in scoring context.
        filter_entries: Entries compiled in filter context.
        boost: Score multiplier, ``None`` when unset.
        sub_criteria: Nested criteria groups, joined using this node's flags.
        previous: The nodes chained before this one.
    """

    field: Field | None = None
    is_or: bool = False
    negating: bool = False
    query_entries: tuple[CriteriaEntry, ...] = ()
    filter_entries: tuple[CriteriaEntry, ...] = ()
    boost: float | None = None
    sub_criteria: tuple[Criteria, ...] = ()
    previous: tuple[Criteria, ...] = dataclasses.field(default=(), repr=False)

    # -- construction -----------------------------------------------------

    @classmethod
    def where(cls, target: Field | str) -> Criteria:
        """Start a chain on *target*."""
        return cls(field=Field.of(target))

    @classmethod
    def or_group(cls) -> Criteria:
        """An empty OR node; its sub-criteria are joined with OR."""
        return cls(is_or=True)

    @property
    def criteria_chain(self) -> tuple[Criteria, ...]:
        """All nodes of the chain, ending with this one."""
        return (*self.previous, self)

    @property
    def is_empty(self) -> bool:
        return not (self.query_entries or self.filter_entries or self.sub_criteria)

    # -- chaining ---------------------------------------------------------

    def and_(self, target: Field | str | Criteria) -> Criteria:
        """Chain a new node joined with AND."""
        return self._chain(target, is_or=False)

    def or_(self, target: Field | str | Criteria) -> Criteria:
        """Chain a new node joined with OR."""
        return self._chain(target, is_or=True)

    def _chain(self, target: Field | str | Criteria, *, is_or: bool) -> Criteria:
        if isinstance(target, Criteria):
            if target.previous:
                raise ValidationError(
                    "Only a single criteria node can be chained; "
                    "use with_sub_criteria() for a whole chain",
                    path="chain",
                )
            return replace(target, is_or=is_or, previous=self.criteria_chain)
        return Criteria(
            field=Field.of(target), is_or=is_or, previous=self.criteria_chain
        )

    def not_(self) -> Criteria:
        """Negate this node."""
        return replace(self, negating=True)

    def with_boost(self, boost: float) -> Criteria:
        if boost < 0:
            raise ValidationError("Boost must not be negative", path="boost")
        return replace(self, boost=float(boost))

    def with_sub_criteria(self, criteria: Criteria) -> Criteria:
        """Attach *criteria* (a whole chain) as a nested group of this node."""
        return replace(self, sub_criteria=(*self.sub_criteria, criteria))

    def add_entry(self, key: OperationKey | str, value: Any = None) -> Criteria:
        """Add an entry, partitioned by the operator's context."""
        op = to_operation_key(key)
        entry = CriteriaEntry(op, value)
        if context_of(op) is OperatorContext.FILTER:
            if _has_entry(self.filter_entries, entry):
                return self
            return replace(self, filter_entries=(*self.filter_entries, entry))
        if _has_entry(self.query_entries, entry):
            return self
        return replace(self, query_entries=(*self.query_entries, entry))

    # -- query operators --------------------------------------------------

    def is_(self, value: Any) -> Criteria:
        return self.add_entry(OperationKey.EQUALS, value)

    def contains(self, value: str) -> Criteria:
        _assert_no_blank(value, f"*{value}*")
        return self.add_entry(OperationKey.CONTAINS, value)

    def starts_with(self, value: str) -> Criteria:
        _assert_no_blank(value, f"{value}*")
        return self.add_entry(OperationKey.STARTS_WITH, value)

    def ends_with(self, value: str) -> Criteria:
        _assert_no_blank(value, f"*{value}")
        return self.add_entry(OperationKey.ENDS_WITH, value)

    def expression(self, value: str) -> Criteria:
        """Raw engine query-string expression, not escaped."""
        return self.add_entry(OperationKey.EXPRESSION, value)

    def fuzzy(self, value: str) -> Criteria:
        return self.add_entry(OperationKey.FUZZY, value)

    def matches(self, value: Any) -> Criteria:
        """Full-text match, any term."""
        return self.add_entry(OperationKey.MATCHES, value)

    def matches_all(self, value: Any) -> Criteria:
        """Full-text match, all terms."""
        return self.add_entry(OperationKey.MATCHES_ALL, value)

    def regexp(self, value: str) -> Criteria:
        return self.add_entry(OperationKey.REGEXP, value)

    def exists(self) -> Criteria:
        return self.add_entry(OperationKey.EXISTS)

    def empty(self) -> Criteria:
        """Field exists but holds no value."""
        return self.add_entry(OperationKey.EMPTY)

    def not_empty(self) -> Criteria:
        return self.add_entry(OperationKey.NOT_EMPTY)

    def in_(self, *values: Any) -> Criteria:
        """
        Match any of *values*.

        Accepts the values as arguments or as a single iterable:
        ``in_("a", "b")`` and ``in_(["a", "b"])`` are equivalent.
        """
        return self.add_entry(OperationKey.IN, _collect_values(values, "in"))

    def not_in(self, *values: Any) -> Criteria:
        return self.add_entry(OperationKey.NOT_IN, _collect_values(values, "not_in"))

    def between(self, lower: Any, upper: Any) -> Criteria:
        """Inclusive range; either bound (not both) may be ``None``."""
        if lower is None and upper is None:
            raise ValidationError("Range [* TO *] is not allowed", path="between")
        return self.add_entry(OperationKey.BETWEEN, (lower, upper))

    def less_than(self, upper: Any) -> Criteria:
        _assert_bound(upper, "less_than")
        return self.add_entry(OperationKey.LESS, upper)

    def less_than_equal(self, upper: Any) -> Criteria:
        _assert_bound(upper, "less_than_equal")
        return self.add_entry(OperationKey.LESS_EQUAL, upper)

    def greater_than(self, lower: Any) -> Criteria:
        _assert_bound(lower, "greater_than")
        return self.add_entry(OperationKey.GREATER, lower)

    def greater_than_equal(self, lower: Any) -> Criteria:
        _assert_bound(lower, "greater_than_equal")
        return self.add_entry(OperationKey.GREATER_EQUAL, lower)

    def has_child(self, query: HasChildQuery) -> Criteria:
        return self.add_entry(OperationKey.HAS_CHILD, query)

    def has_parent(self, query: HasParentQuery) -> Criteria:
        return self.add_entry(OperationKey.HAS_PARENT, query)

    # -- filter operators -------------------------------------------------

    def within(
        self,
        location: GeoPoint | Point | str | Any,
        distance: Distance | str,
    ) -> Criteria:
        """
        Points within *distance* of *location*.

        *location* may be a ``GeoPoint``, a ``Point``, a GeoJSON point,
        ``"lat,lon"`` text or a geohash; *distance* a ``Distance`` or text
        such as ``"10km"``.
        """
        return self.add_entry(OperationKey.WITHIN, (location, distance))

    def bounded_by(self, *corners: Any) -> Criteria:
        """
        Points inside a bounding box.

        Either one box (``GeoBox`` / ``Box``) or two corners (top-left,
        bottom-right) as points, ``"lat,lon"`` text or geohashes.
        """
        return self.add_entry(OperationKey.BBOX, tuple(corners))

    def intersects(self, geometry: Any) -> Criteria:
        return self.add_entry(OperationKey.GEO_INTERSECTS, geometry)

    def is_disjoint(self, geometry: Any) -> Criteria:
        return self.add_entry(OperationKey.GEO_IS_DISJOINT, geometry)

    def geo_within(self, geometry: Any) -> Criteria:
        return self.add_entry(OperationKey.GEO_WITHIN, geometry)

    def geo_contains(self, geometry: Any) -> Criteria:
        return self.add_entry(OperationKey.GEO_CONTAINS, geometry)

    # -- serialisation ----------------------------------------------------

    def node_dict(self) -> dict[str, Any]:
        """This node alone, without the nodes chained before it."""
        data: dict[str, Any] = {}
        if self.field is not None:
            rendered = self.field.to_dict()
            data["field"] = rendered["name"] if len(rendered) == 1 else rendered
        if self.is_or:
            data["or"] = True
        if self.negating:
            data["not"] = True
        if self.boost is not None:
            data["boost"] = self.boost
        entries = self.query_entries + self.filter_entries
        if entries:
            data["entries"] = [entry.to_dict() for entry in entries]
        if self.sub_criteria:
            data["sub"] = [sub.to_dict() for sub in self.sub_criteria]
        return data

    def to_dict(self) -> dict[str, Any]:
        """The whole chain in the ``CriteriaFactory`` format."""
        return {"chain": [node.node_dict() for node in self.criteria_chain]}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _has_entry(entries: tuple[CriteriaEntry, ...], entry: CriteriaEntry) -> bool:
    # 1, True and 1.0 compare equal but are distinct values here.
    return any(
        existing.key is entry.key
        and type(existing.value) is type(entry.value)
        and existing.value == entry.value
        for existing in entries
    )


def _assert_no_blank(value: Any, pattern: str) -> None:
    if isinstance(value, str) and " " in value:
        raise ValidationError(
            f"Cannot construct query '{pattern}'. "
            "Use expression or multiple clauses instead.",
            path="value",
        )


def _assert_bound(value: Any, operator: str) -> None:
    if value is None:
        raise ValidationError(f"Bound of '{operator}' must not be None", path=operator)


def _collect_values(values: tuple[Any, ...], operator: str) -> tuple[Any, ...]:
    if len(values) == 1:
        (single,) = values
        if single is None:
            raise ValidationError(
                f"Values of '{operator}' must not be None", path=operator
            )
        if isinstance(single, Iterable) and not isinstance(
            single, str | bytes | dict
        ):
            return tuple(single)
    return values


def _render_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, Criteria):
        return value.to_dict()
    if isinstance(value, CriteriaQuery):
        return value.criteria.to_dict()
    if isinstance(value, HasChildQuery | HasParentQuery | InnerHitsQuery):
        return {
            item.name: _render_value(getattr(value, item.name))
            for item in dataclasses.fields(value)
            if getattr(value, item.name) is not None
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple | list):
        return [_render_value(item) for item in value]
    return value
