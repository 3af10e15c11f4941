"""Storefront Configuration Module

This module provides unified access to configuration models and settings
management for the Storefront application.
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config
from .models import CatalogAPISettings, LoggingSettings, QuerySettings, Settings

__all__ = [
    "CatalogAPISettings",
    "LoggingSettings",
    "QuerySettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
]
