"""Command-line interface for browsing the catalog."""

from .typer_app import app

__all__ = ["app"]
