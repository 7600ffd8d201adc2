# catalog_browser/cli/runner.py

"""Headless catalog browser: sync, filter and print one listing window."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from catalog_browser.models.filter_criteria import FilterCriteria
from catalog_browser.models.product import Product
from catalog_browser.services.catalog_state import CatalogStore
from catalog_browser.services.catalog_view import CatalogView
from catalog_browser.services.data_synchronizer import (
    CATEGORIES,
    PRODUCTS,
    DataSynchronizer,
)
from catalog_browser.storage.cache_store import CacheStore
from catalog_browser.transport.api_client import ApiClient

logger = logging.getLogger("catalog_browser.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _print_table(products: tuple[Product, ...]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Catalog",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Was", justify="right", style="dim")
    table.add_column("Rating", justify="center")
    table.add_column("Category", style="magenta")
    table.add_column("Stock", justify="center")

    for idx, p in enumerate(products, 1):
        rating = f"{p.rating:.1f} ({p.reviews} reviews)"
        if p.trending:
            rating += " 🔥"
        table.add_row(
            str(idx),
            p.name[:50],
            f"{p.discounted_price:,.2f}",
            f"{p.original_price:,.2f}",
            rating,
            p.category_name or "-",
            "✓" if p.is_stock else "✗",
        )

    Console().print(table)


def _write_json(data: object) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


async def cli_browse(
    criteria: FilterCriteria,
    pages: int = 1,
    output_format: str = "json",
    refresh: bool = False,
) -> int:
    """Print the first *pages* pages of the filtered listing.

    Returns an exit code: 0 on success, 1 when products could not be
    fetched and nothing is cached.
    """
    store = CatalogStore()
    cache = CacheStore()
    client = ApiClient()
    synchronizer = DataSynchronizer(store, cache, client)
    view = CatalogView(store, criteria)

    try:
        if refresh:
            _err.print("[dim]Forcing a fresh fetch...[/dim]")
            await synchronizer.refresh_data(force_fetch=True)
            await synchronizer.sync(CATEGORIES)
        else:
            await synchronizer.start(run_sweep=False)

        state = store.state
        if state.error:
            _err.print(f"[red]Error: {state.error}[/red]")
            if not state.products:
                return 1

        # Each extra page stands in for one scroll to the sentinel
        for _ in range(max(pages, 1) - 1):
            if not view.on_sentinel_visibility(True):
                break

        if not view.filtered:
            _err.print(
                "[yellow]Sorry, there are no matching products![/yellow]"
            )
        else:
            more = " (more available)" if view.has_sentinel else ""
            _err.print(
                f"[green]✓ Showing {len(view.visible)} of "
                f"{len(view.filtered)} matching products, "
                f"page {view.page}{more}[/green]"
            )
        if state.categories:
            names = ", ".join(c.category_name for c in state.categories)
            _err.print(f"[dim]Categories: {names}[/dim]")

        if output_format == "table":
            _print_table(view.visible)
        else:
            _write_json([p.to_dict() for p in view.visible])
        return 0
    finally:
        view.close()
        await synchronizer.close()
        client.close()
        cache.close()


async def run_product_lookup(
    product_id: str, output_format: str = "json",
) -> int:
    """Print a single product by id (0=found, 1=not found)."""
    store = CatalogStore()
    cache = CacheStore()
    client = ApiClient()
    synchronizer = DataSynchronizer(store, cache, client)

    try:
        # Fresh cached products answer the lookup without a request
        synchronizer.load_cached(PRODUCTS)
        product = await synchronizer.fetch_product(product_id)
    finally:
        await synchronizer.close()
        client.close()
        cache.close()

    if product is None:
        _err.print(f"[red]Product '{product_id}' not found.[/red]")
        return 1
    if output_format == "table":
        _print_table((product,))
    else:
        _write_json(product.to_dict())
    return 0


def run_clear_cache() -> int:
    """Purge the local catalog cache."""
    cache = CacheStore()
    try:
        count = cache.clear()
    finally:
        cache.close()
    _err.print(f"[green]✓ Cleared {count} cached collections[/green]")
    return 0
