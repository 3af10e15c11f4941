"""Tests for query key derivation."""

from __future__ import annotations

from storefront.services.query_key import (
    CATEGORIES_KEY,
    QueryKey,
    QueryMode,
    build_query_key,
    categories_key,
)
from storefront.services.state_sync import FilterState


class TestBuildQueryKey:
    """Key derivation from filter state."""

    def test_default_state_is_unfiltered_search(self):
        """The default state lists every product through an empty search."""
        key = build_query_key(FilterState())

        assert key == QueryKey(QueryMode.SEARCH, "", 4, 0)

    def test_search_key_carries_text_and_pagination(self):
        key = build_query_key(FilterState(search_text="phone", limit=8, skip=16))

        assert key.mode is QueryMode.SEARCH
        assert key.as_tuple() == ("search", "phone", 8, 16)

    def test_category_takes_precedence_over_search_text(self):
        """A category key ignores any search text."""
        with_text = build_query_key(FilterState(search_text="phone", category="laptops"))
        without_text = build_query_key(FilterState(category="laptops"))

        assert with_text == without_text
        assert with_text.mode is QueryMode.CATEGORY
        assert with_text.term == "laptops"

    def test_same_parameters_give_equal_hashable_keys(self):
        """Equal request parameters produce equal keys usable as dict keys."""
        first = build_query_key(FilterState(search_text="a", skip=4))
        second = build_query_key(FilterState(search_text="a", skip=4))

        assert first == second
        assert {first: 1}[second] == 1

    def test_different_pages_give_different_keys(self):
        assert build_query_key(FilterState(skip=0)) != build_query_key(FilterState(skip=4))

    def test_search_and_category_with_same_term_differ(self):
        """Mode is part of the key."""
        search = build_query_key(FilterState(search_text="laptops"))
        category = build_query_key(FilterState(category="laptops"))

        assert search != category


class TestQueryKeyFormatting:
    """String forms used in logs."""

    def test_product_key_string(self):
        key = QueryKey(QueryMode.CATEGORY, "laptops", 4, 8)

        assert str(key) == "products:category:'laptops':4:8"

    def test_categories_key_is_fixed(self):
        assert categories_key() is CATEGORIES_KEY
        assert str(categories_key()) == "categories"
        assert categories_key() != build_query_key(FilterState())
