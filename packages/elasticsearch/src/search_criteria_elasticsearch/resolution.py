"""
Field resolution for the Elasticsearch compilers.

Criteria name logical properties; the engine needs mapped field names,
their type (keyword fields take ``terms`` queries) and nested paths.
Hooks may rename or re-type fields before any predicate is built.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from search_criteria.exceptions import MissingFieldError
from search_criteria.field import FieldType, is_keyword_type
from search_criteria.hooks import HookResult, ResolutionContext, ResolutionHook

if TYPE_CHECKING:
    from search_criteria.field import Field
    from search_criteria.operators import OperationKey


@dataclass(frozen=True)
class ResolvedField:
    """A field as the engine knows it."""

    name: str
    field_type: FieldType | str | None = None
    path: str | None = None

    @property
    def is_keyword(self) -> bool:
        return is_keyword_type(self.field_type)

    @classmethod
    def from_field(cls, field: Field) -> ResolvedField:
        return cls(name=field.name, field_type=field.field_type, path=field.path)


def resolve_field(
    field: Field | None,
    hooks: Sequence[ResolutionHook] = (),
    *,
    operator: OperationKey | None = None,
    value: Any = None,
) -> ResolvedField:
    """
    Resolve *field* through *hooks*.

    The first hook returning a handled result wins.  A handled value may
    be a :class:`ResolvedField` or a plain wire name (which keeps the
    field's type and path).

    Raises:
        MissingFieldError: if there is no field or the resolved name is
            empty.
    """
    op_name = operator.value if operator is not None else None
    if field is None:
        raise MissingFieldError(
            "Criteria entries need a field to apply to", operator=op_name
        )

    resolved = ResolvedField.from_field(field)
    if hooks:
        ctx = ResolutionContext.from_field(field, operator=operator, value=value)
        for hook in hooks:
            result = hook(ctx)
            if result.handled:
                resolved = _coerce(result.value, resolved)
                break

    if not resolved.name or not resolved.name.strip():
        raise MissingFieldError(
            f"Field {field.name!r} resolved to an empty name", operator=op_name
        )
    return resolved


def _coerce(value: Any, default: ResolvedField) -> ResolvedField:
    if isinstance(value, ResolvedField):
        return value
    return ResolvedField(
        name=str(value) if value is not None else "",
        field_type=default.field_type,
        path=default.path,
    )


class FieldMappingHook:
    """
    Map logical property names to engine fields.

    Values of *mapping* are wire names or :class:`ResolvedField`
    instances.  Unmapped properties fall through to the next hook.

    Example::

        hook = FieldMappingHook({
            "lastName": "last-name",
            "tags": ResolvedField("tag_ids", FieldType.KEYWORD),
        })
    """

    def __init__(self, mapping: Mapping[str, str | ResolvedField]) -> None:
        self._mapping = dict(mapping)

    def __call__(self, ctx: ResolutionContext) -> HookResult[Any]:
        target = self._mapping.get(ctx.field_name)
        if target is None:
            return HookResult.skip()
        if isinstance(target, ResolvedField):
            return HookResult(target)
        return HookResult(
            ResolvedField(target, ctx.field.field_type, ctx.field.path)
        )
