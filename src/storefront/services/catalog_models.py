"""Catalog API Response Models.

This module defines Pydantic models for catalog API responses to ensure
type safety and validation at the external API boundary.

Unknown fields are ignored so new attributes added by the API do not
break validation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.shared.constants import CatalogAPI


class Product(BaseModel):
    """Single product as returned by the catalog API.

    Only ``id`` (identity) and ``category`` matter to the query layer;
    the remaining fields are passed through to the display.

    Example:
        >>> product = Product(id=1, title="iPhone 9", category="smartphones", price=549)
        >>> product.id
        1
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(..., description="Product identifier")
    title: str = Field(default="", description="Product title")
    category: str = Field(default="", description="Category slug")
    price: float = Field(default=0.0, ge=0, description="Unit price")
    thumbnail: str = Field(default="", description="Thumbnail image URL")


class ResultSet(BaseModel):
    """One page of products plus the total number of matches.

    The API calls the item list ``products``; both names are accepted.
    A page without the item list or the total is rejected.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    items: tuple[Product, ...] = Field(..., alias=CatalogAPI.PRODUCTS_FIELD)
    total: int = Field(..., ge=0, description="Number of matching products")
    skip: int = Field(default=0, ge=0, description="Offset of the first item")
    limit: int = Field(default=0, ge=0, description="Requested page size")

    @property
    def ids(self) -> list[int]:
        """Product ids in display order."""
        return [product.id for product in self.items]


class CategoryList(BaseModel):
    """Category slugs offered by the catalog.

    Older API versions return plain strings, newer ones return objects
    with ``slug``, ``name`` and ``url``; both shapes are normalized to
    slugs.
    """

    model_config = ConfigDict(frozen=True)

    names: tuple[str, ...] = ()

    @field_validator("names", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> tuple[str, ...]:
        if not isinstance(value, (list, tuple)):
            msg = f"expected a list of categories, got {type(value).__name__}"
            raise ValueError(msg)

        names: list[str] = []
        for item in value:
            if isinstance(item, str):
                names.append(item)
            elif isinstance(item, dict) and isinstance(item.get(CatalogAPI.CATEGORY_SLUG_FIELD), str):
                names.append(item[CatalogAPI.CATEGORY_SLUG_FIELD])
            else:
                msg = f"unsupported category entry: {item!r}"
                raise ValueError(msg)
        return tuple(names)
