# catalog_browser/services/catalog_view.py

"""Reactive filtered listing driven by published state and criteria."""

import logging

from catalog_browser.filters.product_pipeline import ProductPipeline
from catalog_browser.models.filter_criteria import FilterCriteria
from catalog_browser.models.product import Product
from catalog_browser.pagination.view_window import ViewWindow
from catalog_browser.services.catalog_state import CatalogState, CatalogStore

logger = logging.getLogger("catalog_browser.view")


class CatalogView:
    """Recomputes the pipeline when its inputs change.

    A recompute happens when the published products tuple is replaced
    (a new object, not merely an equal one) or when ``set_criteria``
    receives different values.  Each recompute starts a new window
    epoch; unrelated state changes such as the loading flag leave the
    window alone.
    """

    def __init__(
        self,
        store: CatalogStore,
        criteria: FilterCriteria | None = None,
        page_size: int | None = None,
    ) -> None:
        self._criteria = criteria or FilterCriteria()
        self._source: tuple[Product, ...] | None = None
        self.window = ViewWindow(page_size)
        self._on_state(store.state)
        self._unsubscribe = store.subscribe(self._on_state)

    def close(self) -> None:
        """Stop following the store."""
        self._unsubscribe()

    # ── Inputs ───────────────────────────────────────────

    @property
    def criteria(self) -> FilterCriteria:
        """The criteria snapshot in effect."""
        return self._criteria

    def set_criteria(self, criteria: FilterCriteria) -> bool:
        """Apply new criteria; returns True if the listing was recomputed."""
        if criteria == self._criteria:
            return False
        self._criteria = criteria
        self._recompute()
        return True

    def on_sentinel_visibility(self, is_intersecting: bool) -> bool:
        """Forward a load-more visibility signal to the window."""
        return self.window.on_visibility(is_intersecting)

    def _on_state(self, state: CatalogState) -> None:
        if state.products is self._source:
            return
        self._source = state.products
        self._recompute()

    def _recompute(self) -> None:
        filtered = ProductPipeline.apply(self._source or (), self._criteria)
        self.window.reset(filtered)
        logger.debug(
            "Listing recomputed: %d matching products", len(filtered),
        )

    # ── Outputs ──────────────────────────────────────────

    @property
    def filtered(self) -> tuple[Product, ...]:
        """Every product matching the current criteria, in order."""
        return self.window.filtered

    @property
    def visible(self) -> tuple[Product, ...]:
        """The currently rendered slice."""
        return self.window.visible

    @property
    def page(self) -> int:
        """1-based page index of the window."""
        return self.window.page

    @property
    def has_sentinel(self) -> bool:
        """Whether more products can be revealed."""
        return self.window.has_sentinel
