"""Services module for Storefront.

This module contains the query-state and cache-coordination layer and the
client for the remote catalog API.
"""

from .cache_store import CacheEntry, CacheStatistics, CacheStatus, QueryCache
from .catalog_client import CatalogAPIClient
from .catalog_models import CategoryList, Product, ResultSet
from .debouncer import Debouncer
from .fetch_coordinator import FetchCoordinator, QueryResult, QueryStatus
from .query_key import QueryKey, QueryMode, build_query_key, categories_key
from .state_sync import (
    FilterState,
    InMemorySearchParams,
    SearchParamsStore,
    StateSynchronizer,
    parse_filter_state,
)

__all__ = [
    "CacheEntry",
    "CacheStatistics",
    "CacheStatus",
    "CatalogAPIClient",
    "CategoryList",
    "Debouncer",
    "FetchCoordinator",
    "FilterState",
    "InMemorySearchParams",
    "Product",
    "QueryCache",
    "QueryKey",
    "QueryMode",
    "QueryResult",
    "QueryStatus",
    "ResultSet",
    "SearchParamsStore",
    "StateSynchronizer",
    "build_query_key",
    "categories_key",
    "parse_filter_state",
]
