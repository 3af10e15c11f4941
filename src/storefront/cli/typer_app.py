"""
Storefront Typer CLI Application

A terminal front end for the catalog query layer: ``browse`` pages through
products for a search text or category, ``categories`` lists the category
slugs.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from storefront.cli.context import CliContext, LogLevel, get_cli_context, set_cli_context
from storefront.cli.error_handler import format_json_output, handle_cli_error
from storefront.cli.options import (
    category_option,
    config_option,
    json_output_option,
    limit_option,
    log_level_option,
    pages_option,
    query_option,
    skip_option,
    version_option,
)
from storefront.cli.render import print_categories, print_snapshots, snapshot_to_dict
from storefront.config.loader import reload_config
from storefront.config.models.settings import Settings
from storefront.services.catalog_client import CatalogAPIClient
from storefront.services.state_sync import FilterState, InMemorySearchParams
from storefront.shared.constants import CLICommands, CLIDefaults, CLIHelp
from storefront.shared.logging import setup_structured_logger
from storefront.viewmodels.catalog_viewmodel import CatalogSnapshot, ProductCatalogViewModel

logger = logging.getLogger(__name__)

app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Annotated[Optional[LogLevel], log_level_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
    config: Annotated[Optional[Path], config_option] = None,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Load settings, configure logging and store the shared options."""
    try:
        settings = reload_config(config)
    except Exception as e:
        exit_code = handle_cli_error(e, "main-callback", json_output=json_output)
        raise typer.Exit(exit_code) from e

    level = log_level or LogLevel(settings.logging.level)
    setup_structured_logger(
        level=level.value,
        log_file=settings.logging.file,
        use_rich_console=settings.logging.use_rich_console,
    )
    set_cli_context(CliContext(log_level=level, json_output=json_output, settings=settings))


async def browse_pages(
    settings: Settings,
    params: InMemorySearchParams,
    pages: int,
) -> list[CatalogSnapshot]:
    """Fetch up to ``pages`` consecutive pages starting at the given filter state.

    Raises:
        StorefrontError: If a page could not be fetched
    """
    snapshots: list[CatalogSnapshot] = []
    async with CatalogAPIClient(settings.api) as client:
        viewmodel = ProductCatalogViewModel(client, params, settings.query)
        try:
            for _ in range(pages):
                viewmodel.snapshot()
                await viewmodel.settle()
                snapshot = viewmodel.snapshot()
                if snapshot.error is not None:
                    raise snapshot.error
                snapshots.append(snapshot)
                logger.debug("Showing page %s", params.to_query_string())
                if not snapshot.can_go_next:
                    break
                viewmodel.on_next_page()
        finally:
            viewmodel.close()
    return snapshots


async def fetch_categories(settings: Settings) -> tuple[str, ...]:
    """Fetch the category slugs through the view model's category query."""
    async with CatalogAPIClient(settings.api) as client:
        viewmodel = ProductCatalogViewModel(client, settings=settings.query)
        try:
            return await viewmodel.load_categories()
        finally:
            viewmodel.close()


@app.command(CLICommands.BROWSE, help=CLIHelp.BROWSE_HELP)
def browse_command(
    query: Annotated[Optional[str], query_option] = None,
    category: Annotated[Optional[str], category_option] = None,
    limit: Annotated[Optional[int], limit_option] = None,
    skip: Annotated[int, skip_option] = 0,
    pages: Annotated[int, pages_option] = CLIDefaults.DEFAULT_PAGES,
) -> None:
    """Show product pages for a search text or a category."""
    if query and category:
        raise typer.BadParameter("--query and --category are mutually exclusive")

    context = get_cli_context()
    settings = context.settings
    state = FilterState(
        search_text=query or "",
        category=category or "",
        limit=limit or settings.query.default_limit,
        skip=skip,
    )
    params = InMemorySearchParams(state.to_params())

    try:
        snapshots = asyncio.run(browse_pages(settings, params, pages))
    except (Exception, KeyboardInterrupt) as e:
        exit_code = handle_cli_error(e, CLICommands.BROWSE, json_output=context.json_output)
        raise typer.Exit(exit_code) from e

    if context.is_json_output_enabled():
        typer.echo(
            format_json_output(
                CLICommands.BROWSE,
                success=True,
                data={"pages": [snapshot_to_dict(snapshot) for snapshot in snapshots]},
            )
        )
    else:
        print_snapshots(Console(), snapshots)


@app.command(CLICommands.CATEGORIES, help=CLIHelp.CATEGORIES_HELP)
def categories_command() -> None:
    """List the product categories."""
    context = get_cli_context()

    try:
        names = asyncio.run(fetch_categories(context.settings))
    except (Exception, KeyboardInterrupt) as e:
        exit_code = handle_cli_error(e, CLICommands.CATEGORIES, json_output=context.json_output)
        raise typer.Exit(exit_code) from e

    if context.is_json_output_enabled():
        typer.echo(
            format_json_output(
                CLICommands.CATEGORIES,
                success=True,
                data={"categories": list(names)},
            )
        )
    else:
        print_categories(Console(), names)


if __name__ == "__main__":
    app()
