"""
Build criteria graphs from dictionary / JSON representations.

Format::

    {"chain": [
        {"field": "name" | {"name": ..., "type": "keyword", "path": ...},
         "or": false, "not": false, "boost": 2.0,
         "entries": [{"op": "equals", "val": "x", "value_type": "integer"}],
         "sub": [<criteria dict>, ...]}
    ]}

A single node dict (without ``"chain"``) is read as a one-node chain.
This is the format produced by :meth:`Criteria.to_dict`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from .criteria import Criteria
from .exceptions import CriteriaError, ValidationError
from .field import Field
from .geo import Box, Distance, GeoBox, GeoPoint, Point
from .operators import OperationKey, to_operation_key
from .query import HasChildQuery, HasParentQuery, InnerHitsQuery, ScoreMode
from .utils import cast_value

_NODE_KEYS = frozenset({"field", "or", "not", "boost", "entries", "sub"})
_ENTRY_KEYS = frozenset({"op", "val", "value_type"})
_SEQUENCE_OPS = frozenset({OperationKey.BETWEEN, OperationKey.IN, OperationKey.NOT_IN})


class CriteriaFactory:
    """
    Factory for criteria graphs.

    - ``from_dict(data)`` builds a :class:`Criteria` chain
    - ``from_json(text)`` parses JSON first
    - ``validate(data)`` reports problems without building
    - ``value_type`` casting via :func:`cast_value`
    """

    # ------------------------------------------------------------------ #
    # Public API                                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Criteria:
        """
        Build a criteria chain from *data*.

        Raises:
            ValidationError: on structural problems, with the offending path.
            UnsupportedOperatorError: on unknown operators.
        """
        errors: list[CriteriaError] = []
        CriteriaFactory._collect_errors(data, errors, path="<root>")
        if errors:
            raise errors[0]
        return CriteriaFactory._build_chain(data, path="<root>")

    @staticmethod
    def from_json(text: str) -> Criteria:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON: {exc}", path="<root>") from exc

        if not isinstance(data, dict):
            raise ValidationError(
                "Top-level JSON value must be an object", path="<root>"
            )
        return CriteriaFactory.from_dict(data)

    @staticmethod
    def validate(data: Any) -> list[str]:
        """Return all problems found in *data*; empty when it is valid."""
        errors: list[CriteriaError] = []
        CriteriaFactory._collect_errors(data, errors, path="<root>")
        return [
            f"{error.path}: {error}"
            if isinstance(error, ValidationError) and error.path
            else str(error)
            for error in errors
        ]

    # ------------------------------------------------------------------ #
    # Internal: validation                                                #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _collect_errors(data: Any, errors: list[CriteriaError], path: str) -> None:
        if not isinstance(data, Mapping):
            errors.append(ValidationError("Criteria must be an object", path=path))
            return

        if "chain" not in data:
            CriteriaFactory._collect_node_errors(data, errors, path)
            return

        chain = data["chain"]
        if not isinstance(chain, list) or not chain:
            errors.append(
                ValidationError("'chain' must be a non-empty list", path=path)
            )
            return
        for idx, node in enumerate(chain):
            CriteriaFactory._collect_node_errors(node, errors, f"{path}.chain[{idx}]")

    @staticmethod
    def _collect_node_errors(
        node: Any, errors: list[CriteriaError], path: str
    ) -> None:
        if not isinstance(node, Mapping):
            errors.append(ValidationError("Node must be an object", path=path))
            return

        unknown = set(node) - _NODE_KEYS
        if unknown:
            errors.append(
                ValidationError(
                    f"Unknown node keys: {', '.join(sorted(unknown))}", path=path
                )
            )

        field = node.get("field")
        if field is not None and not (
            (isinstance(field, str) and field.strip())
            or (
                isinstance(field, Mapping)
                and isinstance(field.get("name"), str)
                and field["name"].strip()
            )
        ):
            errors.append(
                ValidationError(
                    "'field' must be a name or an object with a 'name'",
                    path=f"{path}.field",
                )
            )

        boost = node.get("boost")
        if boost is not None and (
            isinstance(boost, bool) or not isinstance(boost, int | float) or boost < 0
        ):
            errors.append(
                ValidationError(
                    "'boost' must be a non-negative number", path=f"{path}.boost"
                )
            )

        entries = node.get("entries", [])
        if not isinstance(entries, list):
            errors.append(ValidationError("'entries' must be a list", path=path))
        else:
            for idx, entry in enumerate(entries):
                CriteriaFactory._collect_entry_errors(
                    entry, errors, f"{path}.entries[{idx}]"
                )

        subs = node.get("sub", [])
        if not isinstance(subs, list):
            errors.append(ValidationError("'sub' must be a list", path=path))
        else:
            for idx, sub in enumerate(subs):
                CriteriaFactory._collect_errors(sub, errors, f"{path}.sub[{idx}]")

    @staticmethod
    def _collect_entry_errors(
        entry: Any, errors: list[CriteriaError], path: str
    ) -> None:
        if not isinstance(entry, Mapping) or not isinstance(entry.get("op"), str):
            errors.append(
                ValidationError("Entry must be an object with an 'op'", path=path)
            )
            return
        unknown = set(entry) - _ENTRY_KEYS
        if unknown:
            errors.append(
                ValidationError(
                    f"Unknown entry keys: {', '.join(sorted(unknown))}", path=path
                )
            )
        try:
            op = to_operation_key(entry["op"])
        except CriteriaError as exc:
            errors.append(exc)
            return
        if op in (OperationKey.HAS_CHILD, OperationKey.HAS_PARENT):
            value = entry.get("val")
            required = "type" if op is OperationKey.HAS_CHILD else "parent_type"
            if (
                not isinstance(value, Mapping)
                or "query" not in value
                or required not in value
            ):
                errors.append(
                    ValidationError(
                        f"'{op.value}' needs an object with '{required}' and 'query'",
                        path=f"{path}.val",
                    )
                )
                return
            CriteriaFactory._collect_errors(
                value["query"], errors, f"{path}.val.query"
            )

    # ------------------------------------------------------------------ #
    # Internal: build                                                     #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_chain(data: Mapping[str, Any], path: str) -> Criteria:
        nodes = data["chain"] if "chain" in data else [data]
        current: Criteria | None = None
        for idx, node_data in enumerate(nodes):
            node = CriteriaFactory._build_node(node_data, f"{path}.chain[{idx}]")
            previous = current.criteria_chain if current is not None else ()
            current = replace(node, previous=previous)
        assert current is not None
        return current

    @staticmethod
    def _build_node(data: Mapping[str, Any], path: str) -> Criteria:
        node = Criteria(
            field=_build_field(data.get("field")),
            is_or=bool(data.get("or", False)),
            negating=bool(data.get("not", False)),
        )
        if data.get("boost") is not None:
            node = node.with_boost(data["boost"])

        for idx, entry in enumerate(data.get("entries", [])):
            op = to_operation_key(entry["op"])
            value = entry.get("val")
            value_type = entry.get("value_type")
            if value_type is not None:
                value = cast_value(value, value_type)
            entry_path = f"{path}.entries[{idx}].val"
            try:
                value = _coerce_value(op, value, entry_path)
            except ValueError as exc:
                raise ValidationError(str(exc), path=entry_path) from exc
            node = node.add_entry(op, value)

        for idx, sub in enumerate(data.get("sub", [])):
            node = node.with_sub_criteria(
                CriteriaFactory._build_chain(sub, f"{path}.sub[{idx}]")
            )
        return node


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------


def _build_field(data: Any) -> Field | None:
    if data is None:
        return None
    if isinstance(data, str):
        return Field(data)
    return Field(data["name"], field_type=data.get("type"), path=data.get("path"))


def _coerce_geo(value: Any) -> Any:
    """Turn a geo mapping into its value object; anything else is kept."""
    if not isinstance(value, Mapping):
        return value
    keys = set(value)
    if {"lat", "lon"} <= keys:
        return GeoPoint(lat=value["lat"], lon=value["lon"])
    if {"x", "y"} <= keys:
        return Point(x=value["x"], y=value["y"])
    if {"top_left", "bottom_right"} <= keys:
        return GeoBox(
            top_left=_coerce_geo(value["top_left"]),
            bottom_right=_coerce_geo(value["bottom_right"]),
        )
    if {"first", "second"} <= keys:
        return Box(
            first=_coerce_geo(value["first"]), second=_coerce_geo(value["second"])
        )
    if "value" in keys:
        return Distance(**value)
    return value


def _coerce_value(op: OperationKey, value: Any, path: str) -> Any:
    if op in _SEQUENCE_OPS and isinstance(value, list):
        return tuple(value)
    if op in (OperationKey.WITHIN, OperationKey.BBOX) and isinstance(value, list):
        return tuple(_coerce_geo(item) for item in value)
    if op is OperationKey.HAS_CHILD:
        return HasChildQuery(
            type=value["type"],
            query=CriteriaFactory._build_chain(value["query"], f"{path}.query"),
            score_mode=_optional(ScoreMode, value.get("score_mode")),
            min_children=value.get("min_children"),
            max_children=value.get("max_children"),
            ignore_unmapped=value.get("ignore_unmapped"),
            inner_hits=_inner_hits(value.get("inner_hits")),
        )
    if op is OperationKey.HAS_PARENT:
        return HasParentQuery(
            parent_type=value["parent_type"],
            query=CriteriaFactory._build_chain(value["query"], f"{path}.query"),
            score=value.get("score"),
            ignore_unmapped=value.get("ignore_unmapped"),
            inner_hits=_inner_hits(value.get("inner_hits")),
        )
    return value


def _optional(kind: Any, value: Any) -> Any:
    return None if value is None else kind(value)


def _inner_hits(value: Mapping[str, Any] | None) -> InnerHitsQuery | None:
    if value is None:
        return None
    return InnerHitsQuery(
        name=value.get("name"), from_=value.get("from_"), size=value.get("size")
    )
