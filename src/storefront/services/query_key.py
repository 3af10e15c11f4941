"""Deterministic cache keys for catalog queries.

A :class:`QueryKey` identifies one request to the catalog API. Two filter
states that would send the same request produce equal keys, so key
equality is the cache's notion of result equivalence.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storefront.services.state_sync import FilterState


class QueryMode(str, Enum):
    """Which catalog endpoint a key addresses."""

    SEARCH = "search"
    CATEGORY = "category"
    CATEGORIES = "categories"


@dataclass(frozen=True)
class QueryKey:
    """Ordered, hashable identifier of a catalog request.

    Attributes:
        mode: Endpoint family
        term: Search text for SEARCH keys, category slug for CATEGORY keys
        limit: Page size
        skip: Offset of the first item
    """

    mode: QueryMode
    term: str = ""
    limit: int = 0
    skip: int = 0

    def as_tuple(self) -> tuple[str, str, int, int]:
        """Return the key as a plain tuple."""
        return (self.mode.value, self.term, self.limit, self.skip)

    def __str__(self) -> str:
        if self.mode is QueryMode.CATEGORIES:
            return "categories"
        return f"products:{self.mode.value}:{self.term!r}:{self.limit}:{self.skip}"


def build_query_key(state: FilterState) -> QueryKey:
    """Derive the product-list key for a filter state.

    A non-empty category takes precedence and the search text is left out
    of the key entirely. Otherwise the key is a search key, which with an
    empty search text addresses the unfiltered listing.

    Args:
        state: Current filter and pagination state

    Returns:
        The query key for the product list
    """
    if state.category:
        return QueryKey(QueryMode.CATEGORY, state.category, state.limit, state.skip)
    return QueryKey(QueryMode.SEARCH, state.search_text, state.limit, state.skip)


CATEGORIES_KEY = QueryKey(QueryMode.CATEGORIES)


def categories_key() -> QueryKey:
    """Return the fixed key of the category list."""
    return CATEGORIES_KEY
