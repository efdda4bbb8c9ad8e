"""Tests for the criteria exception hierarchy."""

from __future__ import annotations

from search_criteria.exceptions import (
    CriteriaError,
    InvalidArgumentError,
    MissingFieldError,
    UnsupportedOperatorError,
    UnsupportedQueryTypeError,
    ValidationError,
)


def test_all_errors_share_the_base():
    for error in (
        ValidationError("x"),
        InvalidArgumentError("x", field="a", operator="in"),
        UnsupportedOperatorError("x"),
        UnsupportedQueryTypeError("Foo"),
        MissingFieldError("x"),
    ):
        assert isinstance(error, CriteriaError)


def test_validation_error_to_dict():
    error = ValidationError("bad", path="<root>.chain[0]")
    assert error.to_dict() == {
        "error": "VALIDATION_ERROR",
        "message": "bad",
        "path": "<root>.chain[0]",
    }


def test_invalid_argument_names_field_and_operator():
    error = InvalidArgumentError("too few", field="age", operator="between")
    assert "age" in str(error)
    assert "between" in str(error)
    assert error.to_dict()["operator"] == "between"


def test_unsupported_operator_suggestions():
    error = UnsupportedOperatorError("containz", ["contains", "equals"])
    assert error.suggestions == ["contains"]
    assert "Did you mean: contains?" in str(error)
    assert error.to_dict()["kind"] == "operator"


def test_unsupported_operator_kind():
    error = UnsupportedOperatorError("crosses", kind="geo relation")
    assert str(error).startswith("Unsupported geo relation: 'crosses'.")


def test_unsupported_query_type():
    error = UnsupportedQueryTypeError("dict")
    assert str(error) == "Unhandled query implementation: dict"
    assert error.to_dict() == {"error": "UNSUPPORTED_QUERY_TYPE", "query_type": "dict"}
