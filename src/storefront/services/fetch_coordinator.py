"""Fetch coordination on top of the query cache.

The :class:`FetchCoordinator` decides, for the key the display currently
wants, whether cached data can be shown as is, whether a fetch must be
issued (or joined), and what to show while that fetch is in flight.

Display rules of :meth:`FetchCoordinator.resolve`:

1. A fresh entry is returned immediately and no fetch is issued.
2. Otherwise a fetch is issued, or joined when one is already pending for
   the key. Until it completes the result is loading and shows, in order
   of preference, older data for the same key, the data last shown for a
   previous key (keep-previous-data), or nothing.
3. A failed fetch leaves the key in error. The error is reported next to
   the last good data and the key is not fetched again until an explicit
   trigger: switching to another key and back, or :meth:`refetch`.

Responses are always stored under the key they were requested for, so a
late response for a key the user already left cannot change what the
active key displays.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, NamedTuple, TypeVar

from storefront.services.cache_store import CacheEntry, CacheStatus, QueryCache
from storefront.shared.constants import QueryDefaults, QueryOperationNames
from storefront.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    StorefrontError,
)
from storefront.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchFn = Callable[[Any], Awaitable[T]]
Listener = Callable[[Hashable], None]


class QueryStatus(str, Enum):
    """Status of a resolved query as seen by the display layer."""

    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """What the display layer should render for a key.

    Attributes:
        key: The key that was resolved
        data: Data to display; may belong to another key when
            ``is_placeholder_data`` is set
        status: Loading, success or error
        is_loading: Whether a fetch for ``key`` is in flight
        is_placeholder_data: Whether ``data`` was carried over from a
            previously displayed key
        error: Error of the last failed fetch for ``key``
    """

    key: Hashable
    data: T | None
    status: QueryStatus
    is_loading: bool
    is_placeholder_data: bool = False
    error: StorefrontError | None = None

    @property
    def is_success(self) -> bool:
        return self.status is QueryStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is QueryStatus.ERROR


class _FetchOutcome(NamedTuple):
    data: Any
    error: StorefrontError | None


class FetchCoordinator(Generic[T]):
    """Issues, deduplicates and tracks fetches for one kind of query.

    Must be used from code running on an asyncio event loop: fetches are
    scheduled as tasks on the running loop.

    Args:
        fetch_fn: Coroutine function fetching the data for a key
        cache: Cache to use. A private cache is created when omitted.
        stale_time_ms: Freshness window of stored results
        keep_previous_data: Show the last displayed data while a new key loads
        name: Name used in log records
    """

    def __init__(
        self,
        fetch_fn: FetchFn[T],
        *,
        cache: QueryCache[T] | None = None,
        stale_time_ms: float = QueryDefaults.STALE_TIME_MS,
        keep_previous_data: bool = QueryDefaults.KEEP_PREVIOUS_DATA,
        name: str = "query",
    ) -> None:
        self._fetch_fn = fetch_fn
        self.cache: QueryCache[T] = cache if cache is not None else QueryCache()
        self.stale_time_ms = stale_time_ms
        self.keep_previous_data = keep_previous_data
        self.name = name

        self._active_key: Hashable | None = None
        self._last_data: T | None = None
        self._listeners: list[Listener] = []

    @property
    def active_key(self) -> Hashable | None:
        """The key most recently resolved by the display layer."""
        return self._active_key

    def resolve(self, key: Hashable) -> QueryResult[T]:
        """Return what to display for ``key``, fetching when needed.

        Args:
            key: Query key the display currently wants

        Returns:
            The result to render
        """
        key_changed = key != self._active_key
        self._active_key = key

        entry = self.cache.lookup(key, self.stale_time_ms)
        if entry is not None:
            self._last_data = entry.data
            return QueryResult(key, entry.data, QueryStatus.SUCCESS, is_loading=False)

        entry = self.cache.get(key)
        if entry is not None and entry.status is CacheStatus.ERROR and not key_changed:
            return self._error_result(key, entry)

        self._ensure_fetch(key)
        return self._loading_result(key)

    def refetch(self, key: Hashable | None = None) -> QueryResult[T]:
        """Fetch ``key`` (default: the active key) even if it is fresh or failed.

        Raises:
            ValueError: If no key is given and none was resolved yet
        """
        if key is None:
            key = self._active_key
        if key is None:
            msg = "refetch() needs a key before anything was resolved"
            raise ValueError(msg)

        self._active_key = key
        self._ensure_fetch(key)
        return self._loading_result(key)

    async def fetch(self, key: Hashable) -> T:
        """Return fresh data for ``key``, fetching or joining a fetch if needed.

        Raises:
            StorefrontError: If the fetch failed
        """
        entry = self.cache.lookup(key, self.stale_time_ms)
        if entry is not None:
            return entry.data  # type: ignore[return-value]

        outcome: _FetchOutcome = await self._ensure_fetch(key)
        if outcome.error is not None:
            raise outcome.error
        return outcome.data

    async def settle(self, key: Hashable | None = None) -> None:
        """Wait until the fetch for ``key`` (default: the active key) completes.

        Failures are not raised; they are visible through :meth:`resolve`.
        """
        if key is None:
            key = self._active_key
        future = self.cache.pending(key) if key is not None else None
        if future is not None:
            await future

    def invalidate(self, key: Hashable | None = None) -> int:
        """Mark one key, or every key, stale so the next resolve refetches."""
        count = self.cache.invalidate(key)
        logger.debug("Invalidated %d %s entries", count, self.name)
        return count

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run with the key after every completed fetch.

        Returns:
            Function removing the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _ensure_fetch(self, key: Hashable) -> asyncio.Future[_FetchOutcome]:
        pending = self.cache.pending(key)
        if pending is not None:
            self.cache.record_join(key)
            return pending

        task = asyncio.get_running_loop().create_task(self._run_fetch(key))
        self.cache.mark_pending(key, task)
        return task

    async def _run_fetch(self, key: Hashable) -> _FetchOutcome:
        log_operation_start(
            logger,
            QueryOperationNames.FETCH_QUERY,
            {"query": self.name, "query_key": str(key)},
        )
        started = time.perf_counter()

        try:
            data = await self._fetch_fn(key)
        except StorefrontError as e:
            self._record_failure(key, e)
            return _FetchOutcome(None, e)
        except Exception as e:  # noqa: BLE001
            # Boundary: a fetch function must never take the coordinator down
            error = InfrastructureError(
                ErrorCode.FETCH_FAILED,
                f"Fetching {key} failed: {e}",
                ErrorContext(
                    operation=QueryOperationNames.FETCH_QUERY,
                    query_key=str(key),
                ),
                original_error=e,
            )
            self._record_failure(key, error)
            return _FetchOutcome(None, error)

        self.cache.put(key, data)
        if key == self._active_key:
            self._last_data = data

        log_operation_success(
            logger,
            QueryOperationNames.FETCH_QUERY,
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"active": key == self._active_key},
            context={"query": self.name, "query_key": str(key)},
        )
        self._notify(key)
        return _FetchOutcome(data, None)

    def _record_failure(self, key: Hashable, error: StorefrontError) -> None:
        self.cache.mark_error(key, error)
        log_operation_error(
            logger,
            error,
            operation=QueryOperationNames.FETCH_QUERY,
            additional_context={"query": self.name, "query_key": str(key)},
        )
        self._notify(key)

    def _fallback_data(self, entry: CacheEntry[T] | None) -> tuple[T | None, bool]:
        if entry is not None and entry.has_data:
            return entry.data, False
        if self._last_data is not None:
            return self._last_data, True
        return None, False

    def _loading_result(self, key: Hashable) -> QueryResult[T]:
        data, is_placeholder = self._fallback_data(self.cache.get(key))
        if is_placeholder and not self.keep_previous_data:
            data, is_placeholder = None, False
        return QueryResult(
            key,
            data,
            QueryStatus.LOADING,
            is_loading=True,
            is_placeholder_data=is_placeholder,
        )

    def _error_result(self, key: Hashable, entry: CacheEntry[T]) -> QueryResult[T]:
        # Good data is never dropped because a refetch failed
        data, is_placeholder = self._fallback_data(entry)
        return QueryResult(
            key,
            data,
            QueryStatus.ERROR,
            is_loading=False,
            is_placeholder_data=is_placeholder,
            error=entry.error,
        )

    def _notify(self, key: Hashable) -> None:
        for listener in list(self._listeners):
            try:
                listener(key)
            except Exception:  # noqa: BLE001
                logger.exception("Query listener %r failed for %s", listener, key)
