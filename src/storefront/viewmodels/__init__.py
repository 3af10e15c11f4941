"""ViewModels binding the query layer to a display."""

from .catalog_viewmodel import CatalogFetcher, CatalogSnapshot, ProductCatalogViewModel

__all__ = [
    "CatalogFetcher",
    "CatalogSnapshot",
    "ProductCatalogViewModel",
]
