# catalog_browser/services/catalog_state.py

"""Observable container for the published catalog state."""

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from catalog_browser.models.product import Category, Product

logger = logging.getLogger("catalog_browser.sync")

Subscriber = Callable[["CatalogState"], None]


@dataclass(frozen=True)
class CatalogState:
    """Snapshot of everything the listing consumer reads."""

    products: tuple[Product, ...] = ()
    categories: tuple[Category, ...] = ()
    loading: bool = False
    error: str | None = None
    last_fetch_time: int | None = None


class CatalogStore:
    """Holds the current :class:`CatalogState` and notifies subscribers.

    One instance is owned by the root scope that creates it; there is
    no module-level singleton.
    """

    def __init__(self, initial: CatalogState | None = None) -> None:
        self._state = initial or CatalogState()
        self._subscribers: list[Subscriber] = []

    @property
    def state(self) -> CatalogState:
        """The most recently published snapshot."""
        return self._state

    def publish(self, **changes: Any) -> CatalogState:
        """Replace the snapshot with *changes* applied and notify."""
        self._state = dataclasses.replace(self._state, **changes)
        for callback in list(self._subscribers):
            callback(self._state)
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; the returned function unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
