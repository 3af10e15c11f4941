"""Entry point for ``python -m storefront``."""

from storefront.cli.typer_app import app

if __name__ == "__main__":
    app()
