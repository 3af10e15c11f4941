"""
Product catalog ViewModel.

This module binds the query layer to a display: it owns the state
synchronizer, the debounced search input and the two fetch coordinators
(product pages and the category list), and exposes a snapshot of what to
render plus the callbacks a view wires to its controls.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Callable, Protocol

from storefront.config.models.query_settings import QuerySettings
from storefront.services.cache_store import CacheStatus
from storefront.services.catalog_models import CategoryList, Product, ResultSet
from storefront.services.debouncer import Debouncer
from storefront.services.fetch_coordinator import FetchCoordinator
from storefront.services.query_key import QueryKey, build_query_key, categories_key
from storefront.services.state_sync import FilterState, SearchParamsStore, StateSynchronizer
from storefront.shared.constants import QueryDefaults
from storefront.shared.errors import StorefrontError

logger = logging.getLogger(__name__)


class CatalogFetcher(Protocol):
    """The two catalog capabilities the view model needs."""

    def fetch_products(self, key: QueryKey) -> Awaitable[ResultSet]: ...

    def list_categories(self) -> Awaitable[CategoryList]: ...


@dataclass(frozen=True)
class CatalogSnapshot:
    """Everything a view needs to render the catalog once.

    Attributes:
        items: Products to show
        total: Total number of matching products
        is_loading: Whether the current page is still being fetched
        is_placeholder_data: Whether ``items`` belong to the previous page
        error: Error of the last failed product fetch, if any
        categories: Category slugs for the category selector
        categories_error: Error of the category list fetch, if any
        filters: Filter state the snapshot was computed for
        can_go_prev: Whether the Prev control is enabled
        can_go_next: Whether the Next control is enabled
    """

    items: tuple[Product, ...]
    total: int
    is_loading: bool
    is_placeholder_data: bool
    error: StorefrontError | None
    categories: tuple[str, ...]
    categories_error: StorefrontError | None
    filters: FilterState
    can_go_prev: bool
    can_go_next: bool


class ProductCatalogViewModel:
    """
    ViewModel for the paginated, filterable product list.

    Must be created and used on a running asyncio event loop.

    Args:
        fetcher: Catalog API (usually a CatalogAPIClient)
        params: Persisted search parameters (e.g. the URL query string)
        settings: Query layer settings
    """

    def __init__(
        self,
        fetcher: CatalogFetcher,
        params: SearchParamsStore | None = None,
        settings: QuerySettings | None = None,
    ) -> None:
        self.settings = settings or QuerySettings()
        self.synchronizer = StateSynchronizer(params, default_limit=self.settings.default_limit)

        self.products: FetchCoordinator[ResultSet] = FetchCoordinator(
            fetcher.fetch_products,
            stale_time_ms=self.settings.stale_time_ms,
            keep_previous_data=self.settings.keep_previous_data,
            name="products",
        )
        self.categories: FetchCoordinator[CategoryList] = FetchCoordinator(
            lambda _key: fetcher.list_categories(),
            stale_time_ms=QueryDefaults.CATEGORIES_STALE_TIME_MS,
            name="categories",
        )

        self._search_input = Debouncer(self._apply_search_text, self.settings.debounce_ms)
        self._listeners: list[Callable[[], None]] = []
        self._unsubscribers = [
            self.products.subscribe(self._on_fetch_complete),
            self.categories.subscribe(self._on_fetch_complete),
        ]

        logger.debug("Initialized %s", self.__class__.__name__)

    @property
    def filters(self) -> FilterState:
        """Current filter state."""
        return self.synchronizer.state

    @property
    def query_key(self) -> QueryKey:
        """Product-list key for the current filter state."""
        return build_query_key(self.filters)

    def snapshot(self) -> CatalogSnapshot:
        """Resolve both queries and describe what to render now."""
        state = self.filters
        result = self.products.resolve(build_query_key(state))
        category_result = self.categories.resolve(categories_key())

        page = result.data
        items = page.items if page is not None else ()
        total = page.total if page is not None else 0
        categories = category_result.data.names if category_result.data is not None else ()

        return CatalogSnapshot(
            items=items,
            total=total,
            is_loading=result.is_loading,
            is_placeholder_data=result.is_placeholder_data,
            error=result.error,
            categories=categories,
            categories_error=category_result.error,
            filters=state,
            can_go_prev=state.skip >= state.limit,
            can_go_next=page is not None and state.skip + state.limit < total,
        )

    def on_search_text_change(self, text: str) -> None:
        """Search input changed; applied once typing pauses."""
        self._search_input(text)

    def submit_search(self) -> None:
        """Apply a pending search text immediately."""
        self._search_input.flush()

    def on_category_change(self, category: str) -> None:
        """Category selector changed."""
        # A search typed just before must not clear the category later
        self._search_input.cancel()
        self.synchronizer.set_category(category)
        self._notify()

    def on_next_page(self) -> None:
        """Next control pressed."""
        self.synchronizer.next_page()
        self._notify()

    def on_prev_page(self) -> None:
        """Prev control pressed."""
        self.synchronizer.prev_page()
        self._notify()

    def refresh(self) -> None:
        """Fetch the current page again, also after an error.

        A failed category list is requested again as well.
        """
        self.products.refetch(self.query_key)
        entry = self.categories.cache.get(categories_key())
        if entry is not None and entry.status is CacheStatus.ERROR:
            self.categories.refetch(categories_key())
        self._notify()

    async def load_categories(self) -> tuple[str, ...]:
        """Return the category slugs, fetching them once per view model.

        Raises:
            StorefrontError: If the category list could not be fetched
        """
        categories = await self.categories.fetch(categories_key())
        return categories.names

    async def settle(self) -> None:
        """Wait for the fetches of the current page and the category list."""
        await self.products.settle(self.query_key)
        await self.categories.settle(categories_key())

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a callback run whenever the view should re-render.

        Returns:
            Function removing the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Tear down: drop the pending search and detach from the queries."""
        self._search_input.cancel()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._listeners.clear()

    def _apply_search_text(self, text: str) -> None:
        self.synchronizer.set_search_text(text)
        self._notify()

    def _on_fetch_complete(self, key: object) -> None:
        logger.debug("Fetch for %s completed", key)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
