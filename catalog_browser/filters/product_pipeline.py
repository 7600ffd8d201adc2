# catalog_browser/filters/product_pipeline.py

"""Search, filter and sort stages applied to the cached product list."""

import logging
from collections.abc import Sequence

from catalog_browser.models.filter_criteria import FilterCriteria, SortKey
from catalog_browser.models.product import Product

logger = logging.getLogger("catalog_browser.filters")


class ProductPipeline:
    """Pure, order-preserving transformations over a product collection.

    Every stage returns a new tuple and treats an unset criterion as a
    pass-through.  ``apply`` chains them in a fixed order.
    """

    @staticmethod
    def search(
        products: Sequence[Product], text: str,
    ) -> tuple[Product, ...]:
        """Keep products whose name contains *text*, ignoring case."""
        if not text:
            return tuple(products)
        needle = text.lower()
        return tuple(p for p in products if needle in p.name.lower())

    @staticmethod
    def by_rating(
        products: Sequence[Product], min_rating: float | None,
    ) -> tuple[Product, ...]:
        """Keep products rated at least *min_rating*."""
        if min_rating is None:
            return tuple(products)
        return tuple(p for p in products if p.rating >= min_rating)

    @staticmethod
    def by_categories(
        products: Sequence[Product], categories: frozenset[str],
    ) -> tuple[Product, ...]:
        """Keep products in one of *categories*; empty allows all."""
        if not categories:
            return tuple(products)
        return tuple(p for p in products if p.category_name in categories)

    @staticmethod
    def by_price(
        products: Sequence[Product],
        min_price: float | None,
        max_price: float | None,
    ) -> tuple[Product, ...]:
        """Keep products whose discounted price lies in the inclusive range."""
        return tuple(
            p
            for p in products
            if (min_price is None or p.discounted_price >= min_price)
            and (max_price is None or p.discounted_price <= max_price)
        )

    @staticmethod
    def sort(
        products: Sequence[Product], key: SortKey | None,
    ) -> tuple[Product, ...]:
        """Stable sort by *key*; ``None`` keeps the incoming order."""
        if key is None:
            return tuple(products)
        if key is SortKey.NAME:
            return tuple(sorted(products, key=lambda p: p.name))
        if key is SortKey.PRICE_ASC:
            return tuple(sorted(products, key=lambda p: p.discounted_price))
        if key is SortKey.PRICE_DESC:
            return tuple(
                sorted(
                    products,
                    key=lambda p: p.discounted_price,
                    reverse=True,
                )
            )
        return tuple(sorted(products, key=lambda p: p.rating, reverse=True))

    @staticmethod
    def apply(
        products: Sequence[Product], criteria: FilterCriteria,
    ) -> tuple[Product, ...]:
        """Run search → rating → category → price → sort."""
        total = len(products)
        result = ProductPipeline.search(products, criteria.search)
        if result:
            result = ProductPipeline.by_rating(result, criteria.min_rating)
        if result:
            result = ProductPipeline.by_categories(
                result, criteria.categories
            )
        if result:
            result = ProductPipeline.by_price(
                result, criteria.min_price, criteria.max_price
            )
        if result:
            result = ProductPipeline.sort(result, criteria.sort)

        if len(result) != total:
            logger.debug(
                "Pipeline kept %d of %d products", len(result), total,
            )
        return result
