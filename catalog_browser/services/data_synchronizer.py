# catalog_browser/services/data_synchronizer.py

"""Fetch-or-reuse orchestration for the product and category collections."""

import asyncio
import contextlib
import logging
import random
from collections.abc import Callable
from typing import Any

from catalog_browser.config.settings import Settings
from catalog_browser.errors import CacheReadError, TransportError
from catalog_browser.models.product import Category, Product
from catalog_browser.services.catalog_state import CatalogStore
from catalog_browser.storage.cache_store import CacheStore, now_ms
from catalog_browser.transport.api_client import ApiClient, TransportResult

logger = logging.getLogger("catalog_browser.sync")

PRODUCTS = "products"
CATEGORIES = "categories"

_PARSERS: dict[str, Callable[[dict[str, Any]], Any]] = {
    PRODUCTS: Product.from_dict,
    CATEGORIES: Category.from_dict,
}

# Exceptions raised by from_dict on payloads of the wrong shape
_PAYLOAD_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


class DataSynchronizer:
    """Keeps the published catalog in step with the cache and the API.

    For each collection, ``sync`` reuses a fresh cache entry or fetches
    over the network, writes the result back to the cache and only
    then publishes it.  A background sweep forces a refresh once the
    products entry goes stale.
    """

    def __init__(
        self,
        store: CatalogStore,
        cache: CacheStore,
        client: ApiClient,
        rng: random.Random | None = None,
        clock: Callable[[], int] = now_ms,
        ttl_ms: int | None = None,
        sweep_interval_ms: int | None = None,
    ) -> None:
        self.settings = Settings()
        self._store = store
        self._cache = cache
        self._client = client
        self._rng = rng or random.Random()
        self._clock = clock
        self._ttl_ms = (
            self.settings.CACHE_TTL_MS if ttl_ms is None else ttl_ms
        )
        self._sweep_interval_ms = (
            self.settings.SWEEP_INTERVAL_MS
            if sweep_interval_ms is None
            else sweep_interval_ms
        )
        self._sweep_task: asyncio.Task[None] | None = None
        self._closed = False

    # ── Lifecycle ────────────────────────────────────────

    async def start(self, run_sweep: bool = True) -> None:
        """Run the initial sync for both collections, then the sweep."""
        await self.sync(PRODUCTS)
        await self.sync(CATEGORIES)
        if run_sweep and self._sweep_task is None and not self._closed:
            self._sweep_task = asyncio.create_task(
                self._sweep_loop(), name="catalog-sweep",
            )

    async def close(self) -> None:
        """Stop the sweep; late network results will be discarded."""
        self._closed = True
        task, self._sweep_task = self._sweep_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.debug("DataSynchronizer closed")

    @property
    def closed(self) -> bool:
        """True once :meth:`close` has been called."""
        return self._closed

    # ── Sync ─────────────────────────────────────────────

    async def sync(self, resource: str, force_fetch: bool = False) -> bool:
        """Publish *resource* from a fresh cache entry or the network.

        Returns True when new data was published.
        """
        if resource not in _PARSERS:
            msg = f"Unknown resource: {resource!r}"
            raise ValueError(msg)
        if not force_fetch and self.load_cached(resource):
            return True
        return await self._fetch(resource)

    async def refresh_data(self, force_fetch: bool = False) -> bool:
        """Refresh trigger exposed to consumers (products only)."""
        return await self.sync(PRODUCTS, force_fetch=force_fetch)

    def _parse(
        self, resource: str, items: Any,
    ) -> tuple[Any, ...]:
        parse = _PARSERS[resource]
        return tuple(parse(item) for item in items)

    def load_cached(self, resource: str) -> bool:
        """Publish the cached entry if it is still fresh.

        Never touches the network.  Returns True when the cached
        collection was published.
        """
        if not self._cache.is_fresh(
            resource, self._ttl_ms, now=self._clock(),
        ):
            return False
        try:
            entry = self._cache.get(resource)
            if entry is None:
                return False
            items = self._parse(resource, entry.payload)
        except (CacheReadError, *_PAYLOAD_ERRORS) as exc:
            logger.warning(
                "Ignoring unreadable cache for '%s': %s", resource, exc,
            )
            return False

        changes: dict[str, Any] = {resource: items}
        if resource == PRODUCTS:
            changes["last_fetch_time"] = entry.timestamp
        self._store.publish(**changes)
        logger.info(
            "Using cached %s (%d items, fetched at %d)",
            resource,
            len(items),
            entry.timestamp,
        )
        return True

    async def _fetch(self, resource: str) -> bool:
        """Fetch *resource* over the network, then cache and publish it."""
        is_products = resource == PRODUCTS
        fetcher = (
            self._client.get_all_products
            if is_products
            else self._client.get_all_categories
        )
        if is_products:
            self._store.publish(loading=True, error=None)

        try:
            result: TransportResult = await asyncio.to_thread(fetcher)
        except Exception as exc:
            logger.error(
                "Unexpected error fetching %s", resource, exc_info=True,
            )
            result = TransportResult.failure(
                TransportError(str(exc) or "Unknown error occurred")
            )

        if self._closed:
            logger.info(
                "Discarding %s response received after close", resource,
            )
            return False

        items = self._extract(resource, result)
        if items is None:
            if is_products:
                self._store.publish(
                    loading=False,
                    error=self.settings.PRODUCTS_ERROR_MESSAGE,
                )
            else:
                logger.warning(
                    "Categories unavailable, keeping %d previous",
                    len(self._store.state.categories),
                )
            return False

        if is_products:
            shuffled = list(items)
            self._rng.shuffle(shuffled)
            items = tuple(shuffled)

        fetched_at = self._clock()
        self._cache.put(
            resource, [item.to_dict() for item in items], now=fetched_at,
        )

        changes: dict[str, Any] = {resource: items}
        if is_products:
            changes.update(loading=False, last_fetch_time=fetched_at)
        self._store.publish(**changes)
        logger.info("Fetched and published %d %s", len(items), resource)
        return True

    def _extract(
        self, resource: str, result: TransportResult,
    ) -> tuple[Any, ...] | None:
        """Parse ``{resource: [...]}`` from a result, or None on failure."""
        if not result.ok:
            logger.error(
                "Fetching %s failed: %s (status %d)",
                resource,
                result.error.message if result.error else "unknown",
                result.status,
            )
            return None
        try:
            return self._parse(resource, result.data[resource])
        except _PAYLOAD_ERRORS as exc:
            logger.error("Malformed %s payload: %s", resource, exc)
            return None

    # ── Background sweep ─────────────────────────────────

    async def sweep_once(self) -> bool:
        """Force a refresh if the products entry has gone stale.

        Returns True when a refresh was triggered.
        """
        if self._closed:
            return False
        if self._cache.is_fresh(PRODUCTS, self._ttl_ms, now=self._clock()):
            return False
        logger.info("Products cache stale, refreshing in background")
        await self.sync(PRODUCTS, force_fetch=True)
        await self.sync(CATEGORIES)
        return True

    async def _sweep_loop(self) -> None:
        interval = self._sweep_interval_ms / 1000
        while not self._closed:
            await asyncio.sleep(interval)
            try:
                await self.sweep_once()
            except Exception:
                logger.error("Background sweep failed", exc_info=True)

    # ── Single product ───────────────────────────────────

    async def fetch_product(self, product_id: str) -> Product | None:
        """Look up one product, preferring the published collection."""
        for product in self._store.state.products:
            if product.id == product_id:
                return product

        result: TransportResult = await asyncio.to_thread(
            self._client.get_product_by_id, product_id,
        )
        if not result.ok:
            logger.warning(
                "Product %s unavailable: %r", product_id, result.error,
            )
            return None
        data = result.data
        if isinstance(data, dict) and isinstance(data.get("product"), dict):
            data = data["product"]
        try:
            return Product.from_dict(data)
        except _PAYLOAD_ERRORS as exc:
            logger.error("Malformed product %s payload: %s", product_id, exc)
            return None
