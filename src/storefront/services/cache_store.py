"""In-memory query cache with freshness metadata.

This module provides the keyed store behind the fetch coordinator. Each
entry records the last successful result for a query key, when it was
fetched, its status and the future of a fetch that is still in flight.
The in-flight future is what makes request deduplication possible: a
second request for a pending key joins the existing future instead of
issuing another network call.

Entries are never evicted implicitly; the store grows with the number of
distinct keys seen during a session.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

from storefront.shared.constants import CacheStatusValues
from storefront.shared.errors import StorefrontError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheStatus(str, Enum):
    """Lifecycle status of a cache entry."""

    PENDING = CacheStatusValues.PENDING
    FRESH = CacheStatusValues.FRESH
    STALE = CacheStatusValues.STALE
    ERROR = CacheStatusValues.ERROR


@dataclass
class CacheEntry(Generic[T]):
    """Cached result for one query key.

    Attributes:
        key: Query key the entry belongs to
        data: Last successfully fetched result, kept across refetches and errors
        fetched_at: Clock time (seconds) of the last successful fetch
        status: Current lifecycle status
        error: Error of the last failed fetch, cleared on success
        future: Future of the fetch in flight, if any
    """

    key: Hashable
    data: T | None = None
    fetched_at: float | None = None
    status: CacheStatus = CacheStatus.PENDING
    error: StorefrontError | None = None
    future: asyncio.Future[Any] | None = field(default=None, repr=False)

    @property
    def has_data(self) -> bool:
        """Whether a successful result has ever been stored."""
        return self.fetched_at is not None

    @property
    def is_pending(self) -> bool:
        """Whether a fetch for this key is in flight."""
        return self.future is not None and not self.future.done()


@dataclass
class CacheStatistics:
    """Counters describing how the cache was used."""

    hits: int = 0
    misses: int = 0
    deduplicated: int = 0
    fetches: int = 0
    errors: int = 0

    @property
    def hit_ratio(self) -> float:
        """Share of lookups served from fresh entries."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, float]:
        """Export counters for logging."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "deduplicated": self.deduplicated,
            "fetches": self.fetches,
            "errors": self.errors,
            "hit_ratio": self.hit_ratio,
        }


class QueryCache(Generic[T]):
    """Keyed storage of fetch results with freshness tracking.

    Args:
        clock: Function returning the current time in seconds. Defaults to
            ``time.monotonic``.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._entries: dict[Hashable, CacheEntry[T]] = {}
        self.statistics = CacheStatistics()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def keys(self) -> Iterator[Hashable]:
        """Iterate over the keys that have an entry."""
        return iter(list(self._entries))

    def now(self) -> float:
        """Current time according to the cache clock, in seconds."""
        return self._clock()

    def get(self, key: Hashable) -> CacheEntry[T] | None:
        """Return the entry for ``key`` or None when absent."""
        return self._entries.get(key)

    def _entry(self, key: Hashable) -> CacheEntry[T]:
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(key=key)
            self._entries[key] = entry
        return entry

    def put(self, key: Hashable, data: T) -> CacheEntry[T]:
        """Store a successful result; the entry becomes fresh."""
        entry = self._entry(key)
        entry.data = data
        entry.fetched_at = self._clock()
        entry.status = CacheStatus.FRESH
        entry.error = None
        entry.future = None
        logger.debug("Stored fresh result for %s", key)
        return entry

    def is_stale(self, key: Hashable, stale_time_ms: float) -> bool:
        """Check whether ``key`` needs a fetch.

        Only a fresh entry younger than ``stale_time_ms`` can be served.
        Absent, invalidated, refetching and failed entries are stale.
        """
        entry = self._entries.get(key)
        if entry is None or entry.fetched_at is None:
            return True
        if entry.status is not CacheStatus.FRESH:
            return True
        age_ms = (self._clock() - entry.fetched_at) * 1000
        return age_ms > stale_time_ms

    def lookup(self, key: Hashable, stale_time_ms: float) -> CacheEntry[T] | None:
        """Return the entry if it is fresh, counting a hit or a miss."""
        if self.is_stale(key, stale_time_ms):
            self.statistics.misses += 1
            return None
        self.statistics.hits += 1
        return self._entries[key]

    def pending(self, key: Hashable) -> asyncio.Future[Any] | None:
        """Return the future of the fetch in flight for ``key``, if any."""
        entry = self._entries.get(key)
        if entry is not None and entry.is_pending:
            return entry.future
        return None

    def mark_pending(self, key: Hashable, future: asyncio.Future[Any]) -> CacheEntry[T]:
        """Record the fetch in flight for ``key``.

        Raises:
            RuntimeError: If another fetch for ``key`` is still in flight
        """
        entry = self._entry(key)
        if entry.is_pending and entry.future is not future:
            msg = f"A fetch for {key} is already pending"
            raise RuntimeError(msg)
        entry.future = future
        entry.status = CacheStatus.PENDING
        self.statistics.fetches += 1
        return entry

    def mark_error(self, key: Hashable, error: StorefrontError) -> CacheEntry[T]:
        """Record a failed fetch; previously stored data is kept."""
        entry = self._entry(key)
        entry.status = CacheStatus.ERROR
        entry.error = error
        entry.future = None
        self.statistics.errors += 1
        return entry

    def record_join(self, key: Hashable) -> None:
        """Count a request that attached to an existing pending fetch."""
        self.statistics.deduplicated += 1
        logger.debug("Joined pending fetch for %s", key)

    def invalidate(self, key: Hashable | None = None) -> int:
        """Mark one entry, or every entry, stale.

        Pending and failed entries keep their status; the next resolve of a
        stale entry triggers a refetch.

        Returns:
            Number of entries marked stale
        """
        if key is None:
            targets = list(self._entries.values())
        else:
            entry = self._entries.get(key)
            targets = [entry] if entry is not None else []

        count = 0
        for entry in targets:
            if entry.status is CacheStatus.FRESH:
                entry.status = CacheStatus.STALE
                count += 1
        return count

    def clear(self) -> None:
        """Drop every entry. Fetches in flight complete but are not awaited."""
        self._entries.clear()
