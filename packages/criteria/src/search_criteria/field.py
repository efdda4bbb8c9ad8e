"""Field references used by criteria nodes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FieldType(str, Enum):
    """Declared mapping type of a document field."""

    TEXT = "text"
    KEYWORD = "keyword"
    LONG = "long"
    INTEGER = "integer"
    SHORT = "short"
    DOUBLE = "double"
    FLOAT = "float"
    DATE = "date"
    BOOLEAN = "boolean"
    GEO_POINT = "geo_point"
    GEO_SHAPE = "geo_shape"
    NESTED = "nested"
    OBJECT = "object"
    AUTO = "auto"


def is_keyword_type(field_type: FieldType | str | None) -> bool:
    """True when *field_type* declares an exact-value keyword field."""
    if field_type is None:
        return False
    return str(getattr(field_type, "value", field_type)).lower() == "keyword"


@dataclass(frozen=True)
class Field:
    """
    Logical field reference.

    Attributes:
        name: Field name, dot-notation for object fields (``address.city``).
        field_type: Declared type tag, e.g. ``FieldType.KEYWORD``.
        path: Nested path for one-to-many embedded documents
            (``houses.inhabitants``); ``None`` for top-level fields.
    """

    name: str
    field_type: FieldType | str | None = None
    path: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Field name must be a non-empty string")

    @classmethod
    def of(cls, field: Field | str) -> Field:
        return field if isinstance(field, Field) else cls(field)

    @property
    def is_keyword(self) -> bool:
        return is_keyword_type(self.field_type)

    def to_dict(self) -> dict[str, str]:
        data = {"name": self.name}
        if self.field_type is not None:
            data["type"] = str(getattr(self.field_type, "value", self.field_type))
        if self.path:
            data["path"] = self.path
        return data
