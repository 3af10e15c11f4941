"""Query State and Cache Constants.

This module contains the defaults for filter/pagination state, the names of
the persisted search parameters, and the freshness settings of the query
cache.
"""

import math


class QueryDefaults:
    """Default filter, pagination and cache timing values."""

    LIMIT = 4
    SKIP = 0
    SEARCH_TEXT = ""
    CATEGORY = ""

    # Product lists are fresh for 15 seconds
    STALE_TIME_MS = 15_000
    # The category list is fetched once per session
    CATEGORIES_STALE_TIME_MS = math.inf

    DEBOUNCE_MS = 1_000
    KEEP_PREVIOUS_DATA = True


class SearchParamNames:
    """Names of the persisted (URL) search parameters."""

    QUERY = "q"
    CATEGORY = "category"
    LIMIT = "limit"
    SKIP = "skip"


class CacheStatusValues:
    """String values of cache entry statuses."""

    PENDING = "pending"
    FRESH = "fresh"
    STALE = "stale"
    ERROR = "error"


class QueryOperationNames:
    """Operation names used in structured logs and error contexts."""

    FETCH_QUERY = "fetch_query"
    PARSE_FILTER_STATE = "parse_filter_state"
    SEARCH_PRODUCTS = "search_products"
    PRODUCTS_BY_CATEGORY = "products_by_category"
    LIST_CATEGORIES = "list_categories"
