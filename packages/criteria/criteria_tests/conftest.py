"""Shared fixtures for criteria model tests."""

from __future__ import annotations

import pytest

from search_criteria import Criteria


@pytest.fixture
def person_criteria() -> Criteria:
    """``last_name = Miller AND (first_name = John OR first_name = Jack)``."""
    return Criteria.where("last_name").is_("Miller").with_sub_criteria(
        Criteria().or_("first_name").is_("John").or_("first_name").is_("Jack")
    )
