"""Tests for CriteriaFilterCompiler."""

from __future__ import annotations

from search_criteria import Criteria, GeoBox, GeoPoint
from search_criteria_elasticsearch import CriteriaFilterCompiler
from search_criteria_elasticsearch.nodes import BoolQuery, GeoShapeQuery

SQUARE = {
    "type": "Polygon",
    "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
}

BOX = GeoBox(
    top_left=GeoPoint(lat=10, lon=0), bottom_right=GeoPoint(lat=0, lon=10)
)


def test_no_filter_entries():
    assert CriteriaFilterCompiler().compile(Criteria.where("a").is_("x")) is None


def test_single_item_is_unwrapped(near_athens, near_athens_filter):
    assert CriteriaFilterCompiler().compile(near_athens).to_dict() == near_athens_filter


def test_several_items_are_combined_with_must(near_athens):
    criteria = near_athens.and_("area").intersects(SQUARE)
    tree = CriteriaFilterCompiler().compile(criteria)
    assert isinstance(tree, BoolQuery)
    assert len(tree.must) == 2
    assert isinstance(tree.must[1], GeoShapeQuery)


def test_or_node_contributes_one_should(near_athens):
    criteria = near_athens.or_("area").intersects(SQUARE).bounded_by(BOX)
    tree = CriteriaFilterCompiler().compile(criteria)
    assert len(tree.must) == 2
    should = tree.must[1]
    assert isinstance(should, BoolQuery)
    assert [type(node).__name__ for node in should.should] == [
        "GeoShapeQuery",
        "GeoBoundingBoxQuery",
    ]


def test_negating_node_wraps_each_fragment():
    criteria = Criteria.where("area").not_().intersects(SQUARE).bounded_by(BOX)
    tree = CriteriaFilterCompiler().compile(criteria)
    assert len(tree.must) == 2
    assert all(
        isinstance(node, BoolQuery) and len(node.must_not) == 1 for node in tree.must
    )


def test_sub_criteria_filters_follow_the_node(near_athens, near_athens_filter):
    criteria = Criteria.where("name").is_("x").with_sub_criteria(near_athens)
    assert CriteriaFilterCompiler().compile(criteria).to_dict() == near_athens_filter


def test_filter_uses_the_node_field():
    criteria = Criteria.where("a").bounded_by(BOX).and_("b").bounded_by(BOX)
    tree = CriteriaFilterCompiler().compile(criteria)
    assert [node.field for node in tree.must] == ["a", "b"]
