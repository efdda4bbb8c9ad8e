"""Tests for CriteriaFactory."""

from __future__ import annotations

import json

import pytest

from search_criteria import (
    Criteria,
    CriteriaFactory,
    Distance,
    Field,
    FieldType,
    GeoPoint,
    HasChildQuery,
    OperationKey,
    ScoreMode,
)
from search_criteria.exceptions import UnsupportedOperatorError, ValidationError

# -- from_dict ---------------------------------------------------------------


def test_from_dict_builds_the_chain():
    criteria = CriteriaFactory.from_dict(
        {
            "chain": [
                {"field": "name", "entries": [{"op": "equals", "val": "Smith"}]},
                {
                    "field": "age",
                    "or": True,
                    "not": True,
                    "boost": 2,
                    "entries": [{"op": "between", "val": [18, 30]}],
                },
            ]
        }
    )
    first, second = criteria.criteria_chain
    assert first.field == Field("name")
    assert second.is_or and second.negating
    assert second.boost == 2.0
    assert second.query_entries[0].key is OperationKey.BETWEEN
    assert second.query_entries[0].value == (18, 30)


def test_single_node_dict():
    criteria = CriteriaFactory.from_dict(
        {"field": "tag", "entries": [{"op": "IN", "val": ["a", "b"]}]}
    )
    assert criteria.criteria_chain == (criteria,)
    assert criteria.query_entries[0].value == ("a", "b")


def test_field_mapping_with_type_and_path():
    criteria = CriteriaFactory.from_dict(
        {
            "field": {
                "name": "houses.inhabitants.lastName",
                "type": "keyword",
                "path": "houses.inhabitants",
            },
            "entries": [{"op": "equals", "val": "Miller"}],
        }
    )
    assert criteria.field.path == "houses.inhabitants"
    assert criteria.field.is_keyword


def test_to_dict_round_trip():
    original = (
        Criteria.where(Field("name", FieldType.KEYWORD))
        .is_("Smith")
        .or_("age")
        .between(18, 30)
        .with_sub_criteria(Criteria.where("city").in_("Athens", "Paris"))
        .and_("location")
        .within(GeoPoint(lat=38.0, lon=23.7), Distance(value=10))
    )
    assert CriteriaFactory.from_dict(original.to_dict()) == original


def test_value_type_casting():
    criteria = CriteriaFactory.from_dict(
        {
            "field": "age",
            "entries": [{"op": "greater", "val": "18", "value_type": "integer"}],
        }
    )
    assert criteria.query_entries[0].value == 18


def test_has_child_value():
    criteria = CriteriaFactory.from_dict(
        {
            "entries": [
                {
                    "op": "has_child",
                    "val": {
                        "type": "answer",
                        "score_mode": "max",
                        "inner_hits": {"name": "answers", "size": 3},
                        "query": {
                            "field": "body",
                            "entries": [{"op": "matches", "val": "python"}],
                        },
                    },
                }
            ]
        }
    )
    spec = criteria.query_entries[0].value
    assert isinstance(spec, HasChildQuery)
    assert spec.score_mode is ScoreMode.MAX
    assert spec.inner_hits.size == 3
    assert spec.query.field == Field("body")


# -- errors ------------------------------------------------------------------


def test_unknown_operator_suggests():
    with pytest.raises(UnsupportedOperatorError, match="Did you mean"):
        CriteriaFactory.from_dict(
            {"field": "a", "entries": [{"op": "equal", "val": 1}]}
        )


def test_negative_boost_reports_path():
    with pytest.raises(ValidationError) as exc_info:
        CriteriaFactory.from_dict({"chain": [{"field": "a", "boost": -1}]})
    assert exc_info.value.path == "<root>.chain[0].boost"


def test_invalid_geo_point_reports_path():
    with pytest.raises(ValidationError) as exc_info:
        CriteriaFactory.from_dict(
            {
                "field": "location",
                "entries": [
                    {"op": "within", "val": [{"lat": 95, "lon": 0}, "10km"]}
                ],
            }
        )
    assert exc_info.value.path == "<root>.chain[0].entries[0].val"


def test_has_parent_requires_parent_type():
    with pytest.raises(ValidationError, match="parent_type"):
        CriteriaFactory.from_dict(
            {"entries": [{"op": "has_parent", "val": {"query": {"field": "a"}}}]}
        )


def test_from_json():
    criteria = CriteriaFactory.from_json(
        json.dumps({"field": "a", "entries": [{"op": "exists"}]})
    )
    assert criteria.query_entries[0].key is OperationKey.EXISTS


@pytest.mark.parametrize("text", ["{not json", "[1, 2]"])
def test_from_json_rejects(text):
    with pytest.raises(ValidationError):
        CriteriaFactory.from_json(text)


# -- validate ----------------------------------------------------------------


def test_validate_collects_all_errors():
    errors = CriteriaFactory.validate(
        {
            "chain": [
                {"field": 3, "entries": "x"},
                {"field": "b", "color": "red", "entries": [{"val": 1}]},
            ]
        }
    )
    assert errors == [
        "<root>.chain[0].field: 'field' must be a name or an object with a 'name'",
        "<root>.chain[0]: 'entries' must be a list",
        "<root>.chain[1]: Unknown node keys: color",
        "<root>.chain[1].entries[0]: Entry must be an object with an 'op'",
    ]


def test_validate_nested_sub_criteria():
    errors = CriteriaFactory.validate(
        {"field": "a", "sub": [{"chain": []}]}
    )
    assert errors == ["<root>.sub[0]: 'chain' must be a non-empty list"]


def test_validate_valid_data():
    assert CriteriaFactory.validate(Criteria.where("a").is_(1).to_dict()) == []
