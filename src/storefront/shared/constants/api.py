"""Catalog API Constants.

This module contains endpoint paths and request defaults for the remote
product catalog API (DummyJSON-compatible).
"""


class CatalogAPI:
    """Catalog API endpoints and defaults."""

    BASE_URL = "https://dummyjson.com"

    SEARCH_PATH = "/products/search"
    CATEGORY_PATH = "/products/category/{category}"
    CATEGORIES_PATH = "/products/categories"

    # Request timeout in seconds
    DEFAULT_TIMEOUT = 10

    USER_AGENT = "storefront/0.1.0"

    # Response fields
    PRODUCTS_FIELD = "products"
    CATEGORY_SLUG_FIELD = "slug"
