# catalog_browser/pagination/view_window.py

"""Incrementally growing window over a filtered product list."""

import logging
from collections.abc import Sequence

from catalog_browser.config.settings import Settings
from catalog_browser.models.product import Product

logger = logging.getLogger("catalog_browser.pagination")


class ViewWindow:
    """Visible slice of the filtered products, grown by scroll signals.

    Invariant: ``len(visible) == min(page * page_size, len(filtered))``.
    The window only grows until the next :meth:`reset`.
    """

    def __init__(self, page_size: int | None = None) -> None:
        self.page_size: int = (
            Settings.PAGE_SIZE if page_size is None else page_size
        )
        self._filtered: tuple[Product, ...] = ()
        self._visible: tuple[Product, ...] = ()
        self.page: int = 1

    @property
    def filtered(self) -> tuple[Product, ...]:
        """The full collection the window slices."""
        return self._filtered

    @property
    def visible(self) -> tuple[Product, ...]:
        """Products currently exposed to the consumer."""
        return self._visible

    @property
    def saturated(self) -> bool:
        """True once every filtered product is visible."""
        return len(self._visible) >= len(self._filtered)

    @property
    def has_sentinel(self) -> bool:
        """Whether the consumer should render a load-more sentinel."""
        return not self.saturated

    def reset(self, filtered: Sequence[Product]) -> None:
        """Start a new epoch showing the first page of *filtered*."""
        self._filtered = tuple(filtered)
        self.page = 1
        self._visible = self._filtered[: self.page_size]
        logger.debug(
            "Window reset: %d of %d visible",
            len(self._visible),
            len(self._filtered),
        )

    def on_visibility(self, is_intersecting: bool) -> bool:
        """React to a sentinel visibility signal.

        Returns True if the window grew by another page.
        """
        if not is_intersecting or self.saturated:
            return False
        start = self.page * self.page_size
        self._visible = self._visible + self._filtered[
            start : start + self.page_size
        ]
        self.page += 1
        logger.debug(
            "Window grew to page %d: %d of %d visible",
            self.page,
            len(self._visible),
            len(self._filtered),
        )
        return True
