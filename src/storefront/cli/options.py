"""
Reusable Typer Options Module

Option definitions shared by the main callback and the commands, used as
``Annotated`` metadata:

    def main(json_output: Annotated[bool, json_output_option] = False): ...
"""

from __future__ import annotations

import typer

from storefront.shared.constants import CLIDefaults, CLIHelp


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=CLIDefaults.VERSION))
        raise typer.Exit


log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help=CLIHelp.LOG_LEVEL_HELP,
)

json_output_option = typer.Option(
    "--json",
    help=CLIHelp.JSON_HELP,
)

config_option = typer.Option(
    "--config",
    dir_okay=False,
    help=CLIHelp.CONFIG_HELP,
)

version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    callback=version_callback,
    is_eager=True,
)

query_option = typer.Option("--query", "-q", help=CLIHelp.QUERY_HELP)

category_option = typer.Option("--category", "-c", help=CLIHelp.CATEGORY_HELP)

limit_option = typer.Option("--limit", min=1, help=CLIHelp.LIMIT_HELP)

skip_option = typer.Option("--skip", min=0, help=CLIHelp.SKIP_HELP)

pages_option = typer.Option("--pages", min=1, help=CLIHelp.PAGES_HELP)
