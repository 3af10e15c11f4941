"""Tests for the catalog API client against an in-process aiohttp server."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp
import pytest
from aiohttp import test_utils, web

from storefront.config.models.api_settings import CatalogAPISettings
from storefront.services.catalog_client import CatalogAPIClient
from storefront.services.query_key import CATEGORIES_KEY
from storefront.shared.errors import (
    DomainError,
    ErrorCode,
    NotOkError,
    StorefrontNetworkError,
    StorefrontParsingError,
)

PAGE = {
    "products": [
        {"id": 5, "title": "Phone 5", "category": "smartphones", "price": 499.0, "rating": 4.1},
        {"id": 6, "title": "Phone 6", "category": "smartphones", "price": 599.0},
    ],
    "total": 6,
    "skip": 4,
    "limit": 2,
}


@asynccontextmanager
async def serve(routes: list[web.RouteDef], timeout: float = 5) -> AsyncIterator[CatalogAPIClient]:
    """Run ``routes`` on a local server and yield a client pointed at it."""
    app = web.Application()
    app.add_routes(routes)
    async with test_utils.TestServer(app) as server:
        settings = CatalogAPISettings(base_url=str(server.make_url("/")), timeout=timeout)
        async with CatalogAPIClient(settings) as client:
            yield client


class TestSuccessfulRequests:
    """Endpoint mapping and response parsing."""

    @pytest.mark.asyncio
    async def test_search_sends_query_parameters(self):
        seen: dict[str, str] = {}

        async def handler(request: web.Request) -> web.Response:
            seen.update(request.query)
            seen["user_agent"] = request.headers.get("User-Agent", "")
            return web.json_response(PAGE)

        async with serve([web.get("/products/search", handler)]) as client:
            result = await client.search("phone", limit=2, skip=4)

        assert seen["q"] == "phone"
        assert seen["limit"] == "2"
        assert seen["skip"] == "4"
        assert seen["user_agent"].startswith("storefront/")
        assert result.ids == [5, 6]
        assert result.total == 6
        assert result.items[0].title == "Phone 5"

    @pytest.mark.asyncio
    async def test_by_category_uses_category_path(self):
        seen: dict[str, str] = {}

        async def handler(request: web.Request) -> web.Response:
            seen["category"] = request.match_info["category"]
            seen.update(request.query)
            return web.json_response({**PAGE, "products": []})

        async with serve([web.get("/products/category/{category}", handler)]) as client:
            result = await client.by_category("home-decoration", limit=4, skip=0)

        assert seen == {"category": "home-decoration", "limit": "4", "skip": "0"}
        assert result.items == ()

    @pytest.mark.asyncio
    async def test_categories_as_objects(self):
        async def handler(request: web.Request) -> web.Response:
            return web.json_response(
                [
                    {"slug": "beauty", "name": "Beauty", "url": "https://example.test/beauty"},
                    {"slug": "laptops", "name": "Laptops", "url": "https://example.test/laptops"},
                ]
            )

        async with serve([web.get("/products/categories", handler)]) as client:
            categories = await client.list_categories()

        assert categories.names == ("beauty", "laptops")

    @pytest.mark.asyncio
    async def test_categories_as_strings(self):
        async def handler(request: web.Request) -> web.Response:
            return web.json_response(["smartphones", "laptops"])

        async with serve([web.get("/products/categories", handler)]) as client:
            categories = await client.list_categories()

        assert categories.names == ("smartphones", "laptops")

    @pytest.mark.asyncio
    async def test_fetch_products_rejects_categories_key(self):
        async with serve([]) as client:
            with pytest.raises(DomainError) as exc_info:
                await client.fetch_products(CATEGORIES_KEY)

        assert exc_info.value.code is ErrorCode.INVALID_QUERY_KEY


class TestFailures:
    """Mapping of failures onto the error hierarchy."""

    @pytest.mark.asyncio
    async def test_not_found_is_not_ok_error(self):
        async def handler(request: web.Request) -> web.Response:
            return web.json_response({"message": "not found"}, status=404)

        async with serve([web.get("/products/search", handler)]) as client:
            with pytest.raises(NotOkError) as exc_info:
                await client.search("x", limit=4, skip=0)

        assert exc_info.value.status_code == 404
        assert exc_info.value.code is ErrorCode.API_REQUEST_FAILED
        assert "404" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_server_error_code(self):
        async def handler(request: web.Request) -> web.Response:
            return web.Response(status=503)

        async with serve([web.get("/products/search", handler)]) as client:
            with pytest.raises(NotOkError) as exc_info:
                await client.search("x", limit=4, skip=0)

        assert exc_info.value.code is ErrorCode.API_SERVER_ERROR

    @pytest.mark.asyncio
    async def test_invalid_json_is_parsing_error(self):
        async def handler(request: web.Request) -> web.Response:
            return web.Response(text="<html>oops</html>", content_type="application/json")

        async with serve([web.get("/products/search", handler)]) as client:
            with pytest.raises(StorefrontParsingError) as exc_info:
                await client.search("x", limit=4, skip=0)

        assert exc_info.value.code is ErrorCode.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_malformed_page_is_parsing_error(self):
        async def handler(request: web.Request) -> web.Response:
            return web.json_response({"products": [{"title": "no id"}], "total": 1})

        async with serve([web.get("/products/search", handler)]) as client:
            with pytest.raises(StorefrontParsingError) as exc_info:
                await client.search("x", limit=4, skip=0)

        assert exc_info.value.code is ErrorCode.INVALID_RESPONSE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"message": "Product not found"}, {"products": []}])
    async def test_page_without_products_or_total_is_parsing_error(self, payload):
        async def handler(request: web.Request) -> web.Response:
            return web.json_response(payload)

        async with serve([web.get("/products/search", handler)]) as client:
            with pytest.raises(StorefrontParsingError) as exc_info:
                await client.search("x", limit=4, skip=0)

        assert exc_info.value.code is ErrorCode.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_malformed_category_list_is_parsing_error(self):
        async def handler(request: web.Request) -> web.Response:
            return web.json_response({"categories": "nope"})

        async with serve([web.get("/products/categories", handler)]) as client:
            with pytest.raises(StorefrontParsingError):
                await client.list_categories()

    @pytest.mark.asyncio
    async def test_connection_refused_is_network_error(self):
        settings = CatalogAPISettings(base_url=f"http://127.0.0.1:{test_utils.unused_port()}", timeout=2)

        async with CatalogAPIClient(settings) as client:
            with pytest.raises(StorefrontNetworkError) as exc_info:
                await client.search("x", limit=4, skip=0)

        assert exc_info.value.code is ErrorCode.NETWORK_ERROR
        assert isinstance(exc_info.value.original_error, aiohttp.ClientError)

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self):
        async def handler(request: web.Request) -> web.Response:
            await asyncio.sleep(1)
            return web.json_response(PAGE)

        async with serve([web.get("/products/search", handler)], timeout=0.1) as client:
            with pytest.raises(StorefrontNetworkError, match="timed out") as exc_info:
                await client.search("x", limit=4, skip=0)

        assert exc_info.value.code is ErrorCode.API_TIMEOUT


class TestSessionOwnership:
    """Only a session the client created is closed by it."""

    @pytest.mark.asyncio
    async def test_external_session_left_open(self):
        async with aiohttp.ClientSession() as session:
            client = CatalogAPIClient(session=session)
            await client.close()

            assert not session.closed

    @pytest.mark.asyncio
    async def test_own_session_closed(self):
        client = CatalogAPIClient()
        session = await client._get_session()

        await client.close()

        assert session.closed
