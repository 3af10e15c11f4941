"""Storefront Shared Module.

This package contains shared constants, error handling and logging used across Storefront.
"""

__all__ = ["constants", "errors", "logging"]
