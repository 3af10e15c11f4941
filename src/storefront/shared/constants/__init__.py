"""
Storefront Constants Module

This module provides centralized constants for the Storefront application.
All magic values and configuration defaults are defined here to ensure
consistency across the codebase.
"""

from .api import CatalogAPI
from .cli import CLICommands, CLIDefaults, CLIHelp
from .http_codes import ContentTypes, HTTPHeaders, HTTPStatusCodes
from .query import CacheStatusValues, QueryDefaults, QueryOperationNames, SearchParamNames

__all__ = [
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CacheStatusValues",
    "CatalogAPI",
    "ContentTypes",
    "HTTPHeaders",
    "HTTPStatusCodes",
    "QueryDefaults",
    "QueryOperationNames",
    "SearchParamNames",
]
