"""Tests for field resolution and hooks."""

from __future__ import annotations

import pytest

from search_criteria import Field, FieldType, HookResult, OperationKey
from search_criteria.exceptions import MissingFieldError
from search_criteria_elasticsearch import FieldMappingHook, ResolvedField, resolve_field


def test_plain_field():
    field = Field("a.b", FieldType.KEYWORD, "a")
    assert resolve_field(field) == ResolvedField("a.b", FieldType.KEYWORD, "a")


def test_missing_field():
    with pytest.raises(MissingFieldError) as exc_info:
        resolve_field(None, operator=OperationKey.EQUALS)
    assert exc_info.value.operator == "equals"


def test_first_handled_hook_wins():
    seen = []

    def skip(ctx):
        seen.append(ctx.parts)
        return HookResult.skip()

    def rename(ctx):
        return HookResult(f"doc_{ctx.field_name}")

    def never(ctx):
        raise AssertionError("not reached")

    resolved = resolve_field(Field("a.b", path="a"), [skip, rename, never])
    assert resolved == ResolvedField("doc_a.b", None, "a")
    assert seen == [["a", "b"]]


def test_hook_sees_operator_and_value():
    captured = {}

    def capture(ctx):
        captured.update(operator=ctx.operator, value=ctx.value)
        return HookResult.skip()

    resolve_field(Field("a"), [capture], operator=OperationKey.IN, value=("x",))
    assert captured == {"operator": OperationKey.IN, "value": ("x",)}


def test_hook_resolving_to_empty_name():
    with pytest.raises(MissingFieldError, match="empty name"):
        resolve_field(Field("a"), [lambda ctx: HookResult("")])


def test_field_mapping_hook():
    hook = FieldMappingHook(
        {"lastName": "last-name", "tags": ResolvedField("tag_ids", FieldType.KEYWORD)}
    )
    assert resolve_field(Field("lastName", FieldType.TEXT), [hook]) == ResolvedField(
        "last-name", FieldType.TEXT
    )
    assert resolve_field(Field("tags"), [hook]).is_keyword
    assert resolve_field(Field("other"), [hook]) == ResolvedField("other")
