"""
Storefront - Catalog Query Layer

Client-side query state and cache coordination for a filterable,
paginated product catalog backed by a remote search API.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
