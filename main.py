# main.py

"""Entry point for the catalog_browser headless CLI."""

import argparse
import asyncio
import logging
import sys

from catalog_browser.config.logging_config import setup_logging
from catalog_browser.config.settings import Settings
from catalog_browser.models.filter_criteria import FilterCriteria, SortKey

logger = logging.getLogger("catalog_browser.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="catalog_browser",
        description="Browse the product catalog from the local cache or API.",
        epilog=f"API: {Settings.API_BASE_URL}",
    )
    parser.add_argument(
        "-q",
        "--search",
        default="",
        help="Case-insensitive text to match in product names.",
    )
    parser.add_argument(
        "--min-rating",
        type=float,
        default=None,
        dest="min_rating",
        help="Only show products rated at least this (0-5).",
    )
    parser.add_argument(
        "-c",
        "--category",
        action="append",
        default=[],
        dest="categories",
        help="Category name to include (repeatable; default: all).",
    )
    parser.add_argument(
        "--min-price",
        type=float,
        default=None,
        dest="min_price",
        help="Lowest discounted price to include.",
    )
    parser.add_argument(
        "--max-price",
        type=float,
        default=None,
        dest="max_price",
        help="Highest discounted price to include.",
    )
    parser.add_argument(
        "-s",
        "--sort",
        choices=[k.value for k in SortKey],
        default=None,
        help="Sort order (default: shuffled fetch order).",
    )
    parser.add_argument(
        "-p",
        "--pages",
        type=int,
        default=1,
        help=f"Pages of {Settings.PAGE_SIZE} products to show (default: 1).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        default=False,
        help="Ignore the cache and fetch products from the API.",
    )
    parser.add_argument(
        "--product",
        default=None,
        dest="product_id",
        help="Show a single product by id.",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        default=False,
        dest="clear_cache",
        help="Delete the local catalog cache and exit.",
    )
    return parser


def build_criteria(args: argparse.Namespace) -> FilterCriteria:
    """Turn parsed CLI arguments into a FilterCriteria snapshot."""
    return FilterCriteria(
        search=args.search,
        min_rating=args.min_rating,
        categories=frozenset(args.categories),
        min_price=args.min_price,
        max_price=args.max_price,
        sort=SortKey(args.sort) if args.sort else None,
    )


def main() -> None:
    """Route to cache maintenance, single-product lookup or listing."""
    log_file = setup_logging()
    logger.info("catalog_browser starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    from catalog_browser.cli.runner import (
        cli_browse,
        run_clear_cache,
        run_product_lookup,
    )

    try:
        if args.clear_cache:
            exit_code = run_clear_cache()
        elif args.product_id is not None:
            exit_code = asyncio.run(
                run_product_lookup(args.product_id, args.output_format)
            )
        else:
            exit_code = asyncio.run(
                cli_browse(
                    build_criteria(args),
                    pages=args.pages,
                    output_format=args.output_format,
                    refresh=args.refresh,
                )
            )
    except Exception:
        logger.critical("Fatal error during CLI run", exc_info=True)
        raise
    finally:
        logger.info("catalog_browser shutting down")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
