"""
Criteria exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``CriteriaError`` and provide
``to_dict()`` for API-friendly error responses.  None of them signal a
compiler bug: they describe a criteria graph that cannot be compiled.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable


class CriteriaError(Exception):
    """Base exception for all criteria errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ValidationError(CriteriaError):
    """Criteria structure validation failed (builder or factory input)."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "VALIDATION_ERROR",
            "message": self.message,
            "path": self.path,
        }


class InvalidArgumentError(CriteriaError):
    """
    Malformed operator value: wrong arity, type or shape.

    Always names the field and the operator the value was given for.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None,
        operator: str | None,
    ) -> None:
        self.message = message
        self.field = field
        self.operator = operator
        super().__init__(f"{message} (field: {field!r}, operator: {operator!r})")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_ARGUMENT",
            "message": self.message,
            "field": self.field,
            "operator": self.operator,
        }


class UnsupportedOperatorError(CriteriaError):
    """
    Unknown operator, geo relation or distance unit.

    Provides fuzzy-matched suggestions for likely intended names.
    """

    def __init__(
        self,
        operator: str,
        valid_operators: Iterable[str] = (),
        *,
        kind: str = "operator",
    ) -> None:
        self.operator = operator
        self.kind = kind
        self.valid_operators = sorted(valid_operators)
        self.suggestions = get_close_matches(
            operator, self.valid_operators, n=3, cutoff=0.6
        )

        message = f"Unsupported {kind}: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        if self.valid_operators:
            preview = ", ".join(self.valid_operators[:10])
            if len(self.valid_operators) > 10:
                preview += ", ..."
            message += f" Valid values: {preview}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATOR",
            "kind": self.kind,
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": self.valid_operators,
        }


class UnsupportedQueryTypeError(CriteriaError):
    """The query facade got a query variant it cannot dispatch."""

    def __init__(self, query_type: str) -> None:
        self.query_type = query_type
        super().__init__(f"Unhandled query implementation: {query_type}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_QUERY_TYPE",
            "query_type": self.query_type,
        }


class MissingFieldError(CriteriaError):
    """A criteria node carries entries but no resolvable field reference."""

    def __init__(self, message: str, *, operator: str | None = None) -> None:
        self.message = message
        self.operator = operator
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MISSING_FIELD",
            "message": self.message,
            "operator": self.operator,
        }
