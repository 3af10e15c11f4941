"""Query cache configuration model.

This module contains the configuration for the client-side query layer:
freshness window, debounce delay, page size and placeholder behavior.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from storefront.shared.constants import QueryDefaults


class QuerySettings(BaseModel):
    """Query state and cache configuration."""

    stale_time_ms: float = Field(
        default=QueryDefaults.STALE_TIME_MS,
        ge=0,
        description="How long fetched product pages stay fresh, in milliseconds",
    )
    debounce_ms: float = Field(
        default=QueryDefaults.DEBOUNCE_MS,
        ge=0,
        description="Delay applied to search text input, in milliseconds",
    )
    default_limit: int = Field(
        default=QueryDefaults.LIMIT,
        gt=0,
        description="Page size used when the persisted state has none",
    )
    keep_previous_data: bool = Field(
        default=QueryDefaults.KEEP_PREVIOUS_DATA,
        description="Show the last result while the next one loads",
    )


__all__ = ["QuerySettings"]
