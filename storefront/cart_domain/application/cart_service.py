# storefront/cart_domain/application/cart_service.py
"""Application service holding the shopping cart."""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Optional

from storefront.cart_domain.domain.entities.cart_line import CartLine
from storefront.catalog_domain.domain.entities.product import Product
from storefront.common.config.settings import settings
from storefront.common.storage.persistent_store import PersistentStore

logger = logging.getLogger(__name__)


class CartService:
    """
    Authoritative in-memory cart, persisted as a whole snapshot after every change.

    Mutations are synchronous. Persistence is fire-and-forget: when an event loop is
    running each change schedules a background write, writes are applied in order and a
    write whose snapshot has already been superseded is skipped.
    """

    def __init__(self, store: PersistentStore, storage_key: Optional[str] = None) -> None:
        self.store = store
        self.storage_key = storage_key or settings.CART_STORAGE_KEY
        self._lines: list[CartLine] = self._hydrate()
        self._version = 0
        self._pending: set[asyncio.Task] = set()
        self._write_lock = asyncio.Lock()

    def _hydrate(self) -> list[CartLine]:
        stored = self.store.load(self.storage_key, default=[])
        if not isinstance(stored, list):
            logger.warning(f"Stored cart under '{self.storage_key}' is not a list, starting empty")
            return []

        try:
            lines = [CartLine.from_storage_dict(entry) for entry in stored]
        except (ValueError, TypeError) as e:
            logger.warning(f"Stored cart under '{self.storage_key}' is malformed, starting empty: {e}")
            return []

        if len({line.product_id for line in lines}) != len(lines):
            logger.warning(f"Stored cart under '{self.storage_key}' has duplicate products, starting empty")
            return []

        logger.info(f"Restored cart with {len(lines)} lines")
        return lines

    @property
    def cart(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def total_price(self) -> Decimal:
        return sum((line.line_total for line in self._lines), Decimal("0"))

    def get_line(self, product_id: Any) -> Optional[CartLine]:
        return next((line for line in self._lines if line.product_id == product_id), None)

    def add_to_cart(self, product: Product) -> CartLine:
        """Adds one unit of a product, merging with its existing line."""
        for index, line in enumerate(self._lines):
            if line.product_id == product.id:
                updated = line.incremented()
                self._lines[index] = updated
                break
        else:
            updated = CartLine(product=product, quantity=1)
            self._lines.append(updated)

        logger.debug(f"Cart line {product.id} now has quantity {updated.quantity}")
        self._persist()
        return updated

    def remove_from_cart(self, product_id: Any) -> bool:
        remaining = [line for line in self._lines if line.product_id != product_id]
        if len(remaining) == len(self._lines):
            return False
        self._lines = remaining
        self._persist()
        return True

    def clear_cart(self) -> None:
        self._lines = []
        self._persist()

    def _snapshot(self) -> list[dict[str, Any]]:
        return [line.to_storage_dict() for line in self._lines]

    def _persist(self) -> None:
        self._version += 1
        snapshot = self._snapshot()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (scripts, sync callers): write inline
            self.store.save(self.storage_key, snapshot)
            return

        task = loop.create_task(self._write_snapshot(self._version, snapshot))
        self._pending.add(task)
        task.add_done_callback(self._on_write_done)

    async def _write_snapshot(self, version: int, snapshot: list[dict[str, Any]]) -> None:
        async with self._write_lock:
            if version != self._version:
                logger.debug(f"Skipping cart snapshot v{version}, v{self._version} is newer")
                return
            await asyncio.to_thread(self.store.save, self.storage_key, snapshot)

    def _on_write_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background cart persistence failed: {exc}")

    async def flush(self) -> None:
        """Waits for every scheduled cart write to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
