"""Async client for the remote product catalog API.

This module wraps the three catalog endpoints used by the storefront
(text search, category listing and the category list) behind an aiohttp
session, and maps transport failures, non-success responses and malformed
bodies onto the Storefront error hierarchy.

:meth:`CatalogAPIClient.fetch` is the single fetch function handed to the
query coordinators: it dispatches on the mode of a :class:`QueryKey`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError

from storefront.config.models.api_settings import CatalogAPISettings
from storefront.services.catalog_models import CategoryList, ResultSet
from storefront.services.query_key import QueryKey, QueryMode
from storefront.shared.constants import (
    CatalogAPI,
    ContentTypes,
    HTTPHeaders,
    HTTPStatusCodes,
    QueryOperationNames,
)
from storefront.shared.errors import (
    DomainError,
    ErrorCode,
    ErrorContext,
    create_network_error,
    create_not_ok_error,
    create_parsing_error,
)
from storefront.shared.logging import log_api_call

logger = logging.getLogger(__name__)


class CatalogAPIClient:
    """Catalog API client backed by an aiohttp session.

    The client creates its own session on first use unless one is passed
    in; only a session it created is closed by :meth:`close`.

    Args:
        settings: API settings (base URL, timeout, user agent)
        session: Optional externally managed aiohttp session
    """

    def __init__(
        self,
        settings: CatalogAPISettings | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.settings = settings or CatalogAPISettings()
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> CatalogAPIClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.timeout),
                headers={
                    HTTPHeaders.ACCEPT: ContentTypes.JSON,
                    HTTPHeaders.USER_AGENT: self.settings.user_agent,
                },
            )
            self._owns_session = True
            logger.debug("Created aiohttp session for %s", self.settings.base_url)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def search(self, q: str, limit: int, skip: int) -> ResultSet:
        """Search products by free text. An empty ``q`` lists every product."""
        payload = await self._get_json(
            CatalogAPI.SEARCH_PATH,
            {"q": q, "limit": limit, "skip": skip},
            QueryOperationNames.SEARCH_PRODUCTS,
        )
        return self._parse_result_set(payload, QueryOperationNames.SEARCH_PRODUCTS)

    async def by_category(self, category: str, limit: int, skip: int) -> ResultSet:
        """List the products of one category."""
        path = CatalogAPI.CATEGORY_PATH.format(category=quote(category, safe=""))
        payload = await self._get_json(
            path,
            {"limit": limit, "skip": skip},
            QueryOperationNames.PRODUCTS_BY_CATEGORY,
        )
        return self._parse_result_set(payload, QueryOperationNames.PRODUCTS_BY_CATEGORY)

    async def list_categories(self) -> CategoryList:
        """Return the category slugs offered by the catalog."""
        payload = await self._get_json(
            CatalogAPI.CATEGORIES_PATH,
            None,
            QueryOperationNames.LIST_CATEGORIES,
        )
        try:
            return CategoryList(names=payload)
        except ValidationError as e:
            raise create_parsing_error(
                "Malformed category list in API response",
                operation=QueryOperationNames.LIST_CATEGORIES,
                code=ErrorCode.INVALID_RESPONSE,
                original_error=e,
            ) from e

    async def fetch_products(self, key: QueryKey) -> ResultSet:
        """Fetch the product page addressed by a product-list key."""
        if key.mode is QueryMode.CATEGORY:
            return await self.by_category(key.term, key.limit, key.skip)
        if key.mode is QueryMode.SEARCH:
            return await self.search(key.term, key.limit, key.skip)
        raise DomainError(
            ErrorCode.INVALID_QUERY_KEY,
            f"Key {key} does not address a product list",
            ErrorContext(operation=QueryOperationNames.FETCH_QUERY, query_key=str(key)),
        )

    def _parse_result_set(self, payload: Any, operation: str) -> ResultSet:
        try:
            return ResultSet.model_validate(payload)
        except ValidationError as e:
            raise create_parsing_error(
                "Malformed product page in API response",
                operation=operation,
                code=ErrorCode.INVALID_RESPONSE,
                additional_data={"error_count": e.error_count()},
                original_error=e,
            ) from e

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None,
        operation: str,
    ) -> Any:
        url = f"{self.settings.base_url}{path}"
        session = await self._get_session()
        started = time.perf_counter()

        try:
            async with session.get(url, params=params) as response:
                duration_ms = (time.perf_counter() - started) * 1000
                log_api_call(
                    logger,
                    path,
                    status_code=response.status,
                    duration_ms=duration_ms,
                    context={"operation": operation},
                )
                if not HTTPStatusCodes.is_success(response.status):
                    raise create_not_ok_error(response.status, url, operation=operation)
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise create_parsing_error(
                        "API response is not valid JSON",
                        operation=operation,
                        code=ErrorCode.INVALID_RESPONSE,
                        additional_data={"url": url},
                        original_error=e,
                    ) from e
        except asyncio.TimeoutError as e:
            raise create_network_error(
                f"Request to {url} timed out after {self.settings.timeout}s",
                operation=operation,
                url=url,
                original_error=e,
                code=ErrorCode.API_TIMEOUT,
            ) from e
        except aiohttp.ClientError as e:
            raise create_network_error(
                f"Request to {url} failed: {e}",
                operation=operation,
                url=url,
                original_error=e,
            ) from e
