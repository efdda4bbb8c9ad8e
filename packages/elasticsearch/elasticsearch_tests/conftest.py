"""Shared fixtures for the Elasticsearch compiler tests."""

from __future__ import annotations

import pytest

from search_criteria import Criteria, Distance, GeoPoint
from search_criteria_elasticsearch import (
    CriteriaQueryCompiler,
    QueryDispatcher,
    build_default_registry,
)


@pytest.fixture
def compiler() -> CriteriaQueryCompiler:
    return CriteriaQueryCompiler()


@pytest.fixture
def dispatcher() -> QueryDispatcher:
    return QueryDispatcher()


@pytest.fixture
def registry():
    """A private registry tests may modify."""
    return build_default_registry()


@pytest.fixture
def near_athens() -> Criteria:
    return Criteria.where("location").within(
        GeoPoint(lat=37.98, lon=23.72), Distance(value=10)
    )


@pytest.fixture
def near_athens_filter() -> dict:
    return {
        "geo_distance": {
            "location": {"lat": 37.98, "lon": 23.72},
            "distance": "10km",
            "distance_type": "plane",
        }
    }


@pytest.fixture
def person_criteria() -> Criteria:
    """``last_name = Miller AND (first_name = John OR first_name = Jack)``."""
    return Criteria.where("last_name").is_("Miller").with_sub_criteria(
        Criteria().or_("first_name").is_("John").or_("first_name").is_("Jack")
    )
