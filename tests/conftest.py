"""
Pytest configuration and shared fixtures for Storefront tests.

This module provides common fixtures and configuration that can be used
across all test modules in the project.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Generator

import pytest

from storefront.services.catalog_models import CategoryList, Product, ResultSet
from storefront.services.query_key import QueryKey, QueryMode


class FakeClock:
    """Manually advanced clock for cache freshness tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


def make_products(start: int, count: int, category: str = "smartphones") -> tuple[Product, ...]:
    """Build ``count`` products with consecutive ids starting at ``start``."""
    return tuple(
        Product(id=i, title=f"Product {i}", category=category, price=float(i))
        for i in range(start, start + count)
    )


def make_page(skip: int, limit: int, total: int = 30, category: str = "smartphones") -> ResultSet:
    """Build the page a catalog of ``total`` products returns for ``skip``/``limit``."""
    count = max(min(limit, total - skip), 0)
    return ResultSet(
        products=make_products(skip + 1, count, category),
        total=total,
        skip=skip,
        limit=limit,
    )


class FakeCatalog:
    """In-memory catalog fetcher with controllable completion.

    Every request is recorded. With ``gated=True`` a request waits until
    :meth:`release` is called for its key.
    """

    def __init__(self, total: int = 30, categories: tuple[str, ...] = ("laptops", "smartphones"), *, gated: bool = False) -> None:
        self.total = total
        self.categories = categories
        self.gated = gated
        self.requests: list[QueryKey] = []
        self.category_requests = 0
        self.failures: dict[QueryKey, Exception] = {}
        self._gates: dict[QueryKey, asyncio.Event] = {}

    def release(self, key: QueryKey) -> None:
        self._gate(key).set()

    def _gate(self, key: QueryKey) -> asyncio.Event:
        if key not in self._gates:
            self._gates[key] = asyncio.Event()
        return self._gates[key]

    async def fetch_products(self, key: QueryKey) -> ResultSet:
        self.requests.append(key)
        if self.gated:
            await self._gate(key).wait()
        else:
            await asyncio.sleep(0)
        if key in self.failures:
            raise self.failures[key]
        category = key.term if key.mode is QueryMode.CATEGORY else "smartphones"
        return make_page(key.skip, key.limit, self.total, category)

    async def list_categories(self) -> CategoryList:
        self.category_requests += 1
        await asyncio.sleep(0)
        return CategoryList(names=self.categories)


async def drain(rounds: int = 5) -> None:
    """Let scheduled tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock starting at an arbitrary fixed time."""
    return FakeClock()


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    """Catalog of 30 products that answers immediately."""
    return FakeCatalog()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove STOREFRONT_* variables so settings tests start from defaults."""
    for name in list(os.environ):
        if name.startswith("STOREFRONT_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_storefront_logger() -> Generator[None, None, None]:
    """Undo logger setup done by CLI invocations so caplog keeps working."""
    yield
    logger = logging.getLogger("storefront")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
