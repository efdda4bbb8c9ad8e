"""Tests for CriteriaQueryCompiler."""

from __future__ import annotations

import datetime

import pytest

from search_criteria import Criteria, Field, FieldType, OperationKey, Point
from search_criteria.exceptions import (
    InvalidArgumentError,
    MissingFieldError,
    UnsupportedOperatorError,
)
from search_criteria_elasticsearch import (
    CriteriaQueryCompiler,
    FieldMappingHook,
    compile_query,
)
from search_criteria_elasticsearch.nodes import (
    BoolQuery,
    Operator,
    QueryStringQuery,
)


def qs(field: str, value: str, **extra) -> dict:
    body = {"query": value, "fields": [field], "default_operator": "and"}
    body.update(extra)
    return {"query_string": body}


# -- chain semantics ---------------------------------------------------------


def test_and_chain(compiler):
    criteria = Criteria.where("field1").is_("value1").and_("field2").is_("value2")
    assert compiler.compile(criteria).to_dict() == {
        "bool": {"must": [qs("field1", "value1"), qs("field2", "value2")]}
    }


def test_or_chain(compiler):
    criteria = Criteria.where("field1").is_("value1").or_("field2").is_("value2")
    assert compiler.compile(criteria).to_dict() == {
        "bool": {"should": [qs("field1", "value1"), qs("field2", "value2")]}
    }


def test_mixed_chain_keeps_anchor_in_must(compiler):
    criteria = (
        Criteria.where("field1")
        .is_("value1")
        .or_("field2")
        .is_("value2")
        .and_("field3")
        .is_("value3")
        .or_("field4")
        .is_("value4")
    )
    assert compiler.compile(criteria).to_dict() == {
        "bool": {
            "must": [qs("field1", "value1"), qs("field3", "value3")],
            "should": [qs("field2", "value2"), qs("field4", "value4")],
        }
    }


def test_negated_node_goes_to_must_not(compiler):
    criteria = Criteria.where("a").is_("x").and_("b").not_().is_("y")
    assert compiler.compile(criteria).to_dict() == {
        "bool": {"must": [qs("a", "x")], "must_not": [qs("b", "y")]}
    }


def test_negated_anchor(compiler):
    criteria = Criteria.where("a").not_().is_("x")
    assert compiler.compile(criteria).to_dict() == {
        "bool": {"must_not": [qs("a", "x")]}
    }


def test_negated_or_node_is_wrapped(compiler):
    criteria = Criteria.where("a").is_("x").or_("b").not_().is_("y")
    assert compiler.compile(criteria).to_dict() == {
        "bool": {
            "should": [qs("a", "x"), {"bool": {"must_not": [qs("b", "y")]}}]
        }
    }


def test_nodes_without_entries_are_skipped(compiler):
    criteria = Criteria.where("a").and_("b").is_("y")
    assert compiler.compile(criteria).to_dict() == {"bool": {"must": [qs("b", "y")]}}


def test_empty_criteria_compiles_to_nothing(compiler):
    assert compiler.compile(Criteria.where("a")) is None


def test_compilation_is_deterministic(compiler, person_criteria):
    assert compiler.compile(person_criteria) == compiler.compile(person_criteria)


# -- sub-criteria ------------------------------------------------------------


def test_sub_criteria(compiler, person_criteria):
    assert compiler.compile(person_criteria).to_dict() == {
        "bool": {
            "must": [
                qs("last_name", "Miller"),
                {
                    "bool": {
                        "should": [
                            qs("first_name", "John"),
                            qs("first_name", "Jack"),
                        ]
                    }
                },
            ]
        }
    }


def test_or_group_of_sub_criteria(compiler):
    criteria = (
        Criteria.or_group()
        .with_sub_criteria(
            Criteria.where("field1").is_("value1").and_("field2").is_("value2")
        )
        .with_sub_criteria(
            Criteria.where("field3").is_("value3").and_("field4").is_("value4")
        )
    )
    assert compiler.compile(criteria).to_dict() == {
        "bool": {
            "should": [
                {"bool": {"must": [qs("field1", "value1"), qs("field2", "value2")]}},
                {"bool": {"must": [qs("field3", "value3"), qs("field4", "value4")]}},
            ]
        }
    }


def test_empty_sub_criteria_are_dropped(compiler):
    criteria = Criteria.where("a").is_("x").with_sub_criteria(Criteria.where("b"))
    assert compiler.compile(criteria).to_dict() == {"bool": {"must": [qs("a", "x")]}}


# -- leaf shapes -------------------------------------------------------------


def test_matches(compiler):
    criteria = Criteria.where("field1").matches("value1 value2")
    assert compiler.compile(criteria).to_dict() == {
        "bool": {
            "must": [
                {"match": {"field1": {"query": "value1 value2", "operator": "or"}}}
            ]
        }
    }


def test_matches_all(compiler):
    tree = compiler.compile(Criteria.where("body").matches_all("quick fox"))
    assert tree.must[0].to_dict() == {
        "match": {"body": {"query": "quick fox", "operator": "and"}}
    }


@pytest.mark.parametrize(
    ("method", "expected"),
    [
        ("contains", "*a\\+b*"),
        ("starts_with", "a\\+b*"),
        ("ends_with", "*a\\+b"),
    ],
)
def test_wildcards_escape_the_value(compiler, method, expected):
    tree = compiler.compile(getattr(Criteria.where("name"), method)("a+b"))
    assert tree.must[0].to_dict() == {
        "query_string": {
            "query": expected,
            "fields": ["name"],
            "analyze_wildcard": True,
        }
    }


def test_equals_escapes(compiler):
    tree = compiler.compile(Criteria.where("path").is_("a/b:c"))
    assert tree.must[0].query == "a\\/b\\:c"


def test_expression_is_not_escaped(compiler):
    tree = compiler.compile(Criteria.where("name").expression("smi* OR jo?n"))
    assert tree.must[0] == QueryStringQuery("smi* OR jo?n", fields=("name",))


def test_fuzzy_and_regexp(compiler):
    tree = compiler.compile(
        Criteria.where("name").fuzzy("smith~").and_("code").regexp("ab[0-9]+")
    )
    assert [node.to_dict() for node in tree.must] == [
        {"fuzzy": {"name": {"value": "smith\\~"}}},
        {"regexp": {"code": {"value": "ab[0-9]+"}}},
    ]


def test_empty(compiler):
    criteria = Criteria.where("field1").empty()
    assert compiler.compile(criteria).to_dict() == {
        "bool": {
            "must": [
                {
                    "bool": {
                        "must": [{"exists": {"field": "field1"}}],
                        "must_not": [{"wildcard": {"field1": {"wildcard": "*"}}}],
                    }
                }
            ]
        }
    }


def test_exists_and_not_empty(compiler):
    tree = compiler.compile(Criteria.where("a").exists().and_("b").not_empty())
    assert [node.to_dict() for node in tree.must] == [
        {"exists": {"field": "a"}},
        {"wildcard": {"b": {"wildcard": "*"}}},
    ]


def test_in_on_text_field(compiler):
    tree = compiler.compile(Criteria.where("name").in_("Smith", "O'Hara (jr)"))
    assert tree.must[0].to_dict() == {
        "query_string": {
            "query": '"Smith" "O\'Hara \\(jr\\)"',
            "fields": ["name"],
        }
    }


def test_not_in_on_text_field(compiler):
    tree = compiler.compile(Criteria.where("name").not_in("a", "b"))
    assert tree.must[0].query == 'NOT("a" "b")'


def test_in_on_keyword_field(compiler):
    tree = compiler.compile(
        Criteria.where(Field("tag", FieldType.KEYWORD)).in_(["x", 1, True])
    )
    assert tree.must[0].to_dict() == {
        "bool": {"must": [{"terms": {"tag": ["x", "1", "true"]}}]}
    }


def test_not_in_on_keyword_field(compiler):
    tree = compiler.compile(Criteria.where(Field("tag", "keyword")).not_in("x"))
    assert tree.must[0].to_dict() == {
        "bool": {"must_not": [{"terms": {"tag": ["x"]}}]}
    }


def test_ranges(compiler):
    criteria = (
        Criteria.where("age")
        .between(18, None)
        .and_("born")
        .less_than(datetime.date(2000, 1, 1))
        .and_("score")
        .greater_than_equal(5)
    )
    assert [node.to_dict() for node in compiler.compile(criteria).must] == [
        {"range": {"age": {"gte": 18}}},
        {"range": {"born": {"lt": "2000-01-01"}}},
        {"range": {"score": {"gte": 5}}},
    ]


# -- boost and nesting -------------------------------------------------------


def test_boost_on_single_entry(compiler):
    tree = compiler.compile(Criteria.where("a").with_boost(2).is_("x"))
    assert tree.must[0] == QueryStringQuery(
        "x", fields=("a",), default_operator=Operator.AND, boost=2.0
    )


def test_boost_on_multiple_entries(compiler):
    tree = compiler.compile(Criteria.where("a").with_boost(2).is_("x").contains("y"))
    node = tree.must[0]
    assert isinstance(node, BoolQuery)
    assert node.boost == 2.0
    assert len(node.must) == 2
    assert all(child.boost is None for child in node.must)


def test_nested_field(compiler):
    criteria = Criteria.where(
        Field("houses.inhabitants.lastName", path="houses.inhabitants")
    ).is_("Miller")
    assert compiler.compile(criteria).to_dict() == {
        "bool": {
            "must": [
                {
                    "nested": {
                        "path": "houses.inhabitants",
                        "query": qs("houses.inhabitants.lastName", "Miller"),
                        "score_mode": "avg",
                    }
                }
            ]
        }
    }


# -- filter context ----------------------------------------------------------


def test_filter_entries_are_not_scored(compiler, near_athens):
    assert compiler.compile(near_athens) is None


def test_include_filter_adds_match_all(compiler, near_athens, near_athens_filter):
    assert compiler.compile(near_athens, include_filter=True).to_dict() == {
        "bool": {"must": [{"match_all": {}}], "filter": [near_athens_filter]}
    }


def test_include_filter_with_scoring_part(compiler, near_athens, near_athens_filter):
    criteria = Criteria.where("name").is_("x").and_(near_athens)
    assert compiler.compile(criteria, include_filter=True).to_dict() == {
        "bool": {"must": [qs("name", "x")], "filter": [near_athens_filter]}
    }


def test_compile_filter(compiler, near_athens, near_athens_filter):
    assert compiler.compile_filter(near_athens).to_dict() == near_athens_filter


# -- hooks -------------------------------------------------------------------


def test_field_mapping_hook():
    compiler = CriteriaQueryCompiler(
        hooks=[FieldMappingHook({"lastName": "last-name"})]
    )
    tree = compiler.compile(Criteria.where("lastName").is_("x").and_("age").is_(3))
    assert tree.to_dict() == {
        "bool": {"must": [qs("last-name", "x"), qs("age", "3")]}
    }


# -- errors ------------------------------------------------------------------


def test_entries_without_field(compiler):
    with pytest.raises(MissingFieldError):
        compiler.compile(Criteria.or_group().is_("x"))


def test_malformed_value(compiler):
    criteria = Criteria.where("age").add_entry("between", (1, 2, 3))
    with pytest.raises(InvalidArgumentError, match="2 element"):
        compiler.compile(criteria)


def test_text_is_not_a_value_list(compiler):
    with pytest.raises(InvalidArgumentError, match="sequence") as excinfo:
        compiler.compile(Criteria.where("tags").add_entry("in", "abc"))
    assert excinfo.value.field == "tags"
    assert excinfo.value.operator == "in"


def test_out_of_range_point_is_an_invalid_argument(compiler):
    criteria = Criteria.where("loc").within(Point(x=200, y=0), "1km")
    with pytest.raises(InvalidArgumentError, match="out of range") as excinfo:
        compiler.compile_filter(criteria)
    assert excinfo.value.field == "loc"
    assert excinfo.value.operator == "within"


def test_unregistered_operator(registry):
    registry.unregister(OperationKey.EQUALS)
    compiler = CriteriaQueryCompiler(registry)
    with pytest.raises(UnsupportedOperatorError):
        compiler.compile(Criteria.where("a").is_(1))


def test_module_level_compile_query():
    assert compile_query(Criteria.where("a").is_("x")).to_dict() == {
        "bool": {"must": [qs("a", "x")]}
    }
