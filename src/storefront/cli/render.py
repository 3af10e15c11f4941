"""Terminal rendering of catalog snapshots with rich."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table

from storefront.services.state_sync import FilterState
from storefront.viewmodels.catalog_viewmodel import CatalogSnapshot


def describe_filters(filters: FilterState) -> str:
    """One-line description of what a page shows."""
    if filters.category:
        scope = f"category '{filters.category}'"
    elif filters.search_text:
        scope = f"search '{filters.search_text}'"
    else:
        scope = "all products"
    return f"{scope}, skip {filters.skip}, limit {filters.limit}"


def build_products_table(snapshot: CatalogSnapshot) -> Table:
    """Build a table with one row per product of ``snapshot``."""
    filters = snapshot.filters
    last = min(filters.skip + len(snapshot.items), snapshot.total)
    table = Table(
        title=describe_filters(filters),
        caption=f"{filters.skip + 1 if snapshot.items else 0}-{last} of {snapshot.total}",
    )
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title")
    table.add_column("Category", style="magenta")
    table.add_column("Price", justify="right", style="green")

    for product in snapshot.items:
        table.add_row(str(product.id), product.title, product.category, f"{product.price:.2f}")
    return table


def print_snapshots(console: Console, snapshots: list[CatalogSnapshot]) -> None:
    """Print every fetched page."""
    if not snapshots or not snapshots[0].items:
        console.print("No products found.")
        return
    for snapshot in snapshots:
        console.print(build_products_table(snapshot))


def print_categories(console: Console, names: tuple[str, ...]) -> None:
    """Print the category slugs, one per line."""
    if not names:
        console.print("No categories found.")
        return
    for name in names:
        console.print(name)


def snapshot_to_dict(snapshot: CatalogSnapshot) -> dict[str, Any]:
    """JSON-ready view of a snapshot."""
    return {
        "filters": snapshot.filters.to_params(),
        "total": snapshot.total,
        "items": [product.model_dump() for product in snapshot.items],
        "can_go_prev": snapshot.can_go_prev,
        "can_go_next": snapshot.can_go_next,
    }
