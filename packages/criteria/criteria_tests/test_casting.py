"""Tests for value casting helpers."""

from __future__ import annotations

import datetime
import uuid

import pytest

from search_criteria.utils import cast_value, parse_list_value


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (["a", "b"], ["a", "b"]),
        ("a, b", ["a", "b"]),
        ("['a', 'b']", ["a", "b"]),
        ("[]", []),
        (3, [3]),
    ],
)
def test_parse_list_value(value, expected):
    assert parse_list_value(value) == expected


@pytest.mark.parametrize(
    ("value", "value_type", "expected"),
    [
        ("42", "long", 42),
        ("1.5", "double", 1.5),
        ("yes", "boolean", True),
        ("2024-03-01T10:00:00", "date", datetime.date(2024, 3, 1)),
        (12, "keyword", "12"),
        ("7", "auto", 7),
        ("false", "auto", False),
        ("x", None, "x"),
    ],
)
def test_cast_value(value, value_type, expected):
    assert cast_value(value, value_type) == expected


def test_cast_datetime_to_utc():
    result = cast_value("2024-03-01T12:00:00+02:00", "datetime")
    assert result == datetime.datetime(2024, 3, 1, 10, 0, tzinfo=datetime.timezone.utc)


def test_cast_uuid():
    value = "12345678-1234-5678-1234-567812345678"
    assert cast_value(value, "uuid") == uuid.UUID(value)


def test_lists_cast_per_item():
    assert cast_value(["1", "2"], "integer") == [1, 2]


def test_failed_cast_passes_value_through():
    assert cast_value("abc", "integer") == "abc"
