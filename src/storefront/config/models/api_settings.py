"""API configuration models.

This module contains the configuration model for the remote product
catalog API.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from storefront.shared.constants import CatalogAPI


class CatalogAPISettings(BaseModel):
    """Catalog API configuration.

    This class manages the base URL of the catalog service and the
    request timeout used by the HTTP client.
    """

    base_url: str = Field(
        default=CatalogAPI.BASE_URL,
        description="Base URL of the catalog API",
    )
    timeout: float = Field(
        default=CatalogAPI.DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    user_agent: str = Field(
        default=CatalogAPI.USER_AGENT,
        description="User-Agent header sent with every request",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            msg = f"base_url must be an http(s) URL, got {value!r}"
            raise ValueError(msg)
        return value.rstrip("/")


__all__ = ["CatalogAPISettings"]
