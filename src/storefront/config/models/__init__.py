"""Configuration domain models."""

from __future__ import annotations

from .api_settings import CatalogAPISettings
from .logging_settings import LoggingSettings
from .query_settings import QuerySettings
from .settings import Settings

__all__ = [
    "CatalogAPISettings",
    "LoggingSettings",
    "QuerySettings",
    "Settings",
]
