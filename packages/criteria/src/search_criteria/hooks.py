"""
Field resolution hooks.

A backend resolves each criteria field to its wire name before building
predicates.  Hooks run in order; the first one returning a handled
:class:`HookResult` wins, otherwise the field's own attributes are used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, cast

if TYPE_CHECKING:
    from .field import Field
    from .operators import OperationKey

T = TypeVar("T")


@dataclass
class HookResult(Generic[T]):
    """
    Result from a resolution hook.

    Attributes:
        value: The resolved value.
        handled: If ``True``, skip default resolution.
    """

    value: T
    handled: bool = True

    @classmethod
    def skip(cls) -> HookResult[None]:
        """Let default resolution handle it."""
        result = cls(value=None, handled=False)  # type: ignore[arg-type]
        return cast("HookResult[None]", result)


@dataclass
class ResolutionContext:
    """
    What a hook gets to look at.

    Attributes:
        field: The logical field reference from the criteria node.
        parts: Dot-separated parts of the field name.
        operator: Operator of the entry being compiled, if any.
        value: The entry value.
    """

    field: Field
    parts: list[str] = field(default_factory=list)
    operator: OperationKey | None = None
    value: Any = None

    @property
    def field_name(self) -> str:
        return self.field.name

    @classmethod
    def from_field(
        cls,
        target: Field,
        operator: OperationKey | None = None,
        value: Any = None,
    ) -> ResolutionContext:
        return cls(
            field=target,
            parts=target.name.split("."),
            operator=operator,
            value=value,
        )


class ResolutionHook(Protocol):
    """
    Protocol for field resolution hooks.

    If ``result.handled`` is ``True``, default resolution is skipped and
    ``result.value`` is used.
    """

    def __call__(self, ctx: ResolutionContext) -> HookResult[Any]:
        ...
