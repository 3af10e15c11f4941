"""
CLI Configuration Constants

This module contains constants for the command-line catalog browser.
"""


class CLIDefaults:
    """Default values and exit codes for the CLI."""

    VERSION = "0.1.0"
    EXIT_INTERRUPTED = 130

    DEFAULT_PAGES = 1


class CLICommands:
    """CLI command names."""

    BROWSE = "browse"
    CATEGORIES = "categories"


class CLIHelp:
    """CLI help texts."""

    APP_NAME = "storefront"
    APP_DESCRIPTION = "Browse a paginated product catalog from the terminal."
    APP_STYLE = "rich"
    VERSION_TEXT = "storefront {version}"

    BROWSE_HELP = "Show product pages for a search text or a category."
    CATEGORIES_HELP = "List the product categories."
    QUERY_HELP = "Search text (clears the category filter)."
    CATEGORY_HELP = "Category slug (clears the search text)."
    LIMIT_HELP = "Products per page."
    SKIP_HELP = "Offset of the first product."
    PAGES_HELP = "Number of consecutive pages to show."
    LOG_LEVEL_HELP = "Logging level."
    JSON_HELP = "Print results as JSON."
    CONFIG_HELP = "Path of a TOML configuration file."
