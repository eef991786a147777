"""Per-product image resources with an explicit acquire/release lifecycle."""

import asyncio
import logging
from typing import Any, Iterable, Optional

from storefront.catalog_domain.domain.entities.product import Product
from storefront.catalog_domain.infrastructure.api_clients.catalog_api_client import CatalogApiClient
from storefront.common.config.settings import settings
from storefront.common.exceptions.custom_exceptions import APIError
from storefront.image_domain.domain.entities.image_handle import ImageHandle
from storefront.image_domain.infrastructure.blob_registry import BlobRegistry

logger = logging.getLogger(__name__)


class ImageResourceCache:
    """
    Fetches product images on demand and wraps them in scoped handles.

    Every handle returned by acquire() must be passed to release() exactly once.
    Fetch failures never propagate: they resolve to the shared placeholder handle,
    which is never tracked and whose release is a no-op.
    """

    def __init__(
        self,
        api_client: CatalogApiClient,
        registry: Optional[BlobRegistry] = None,
        placeholder_url: Optional[str] = None,
    ) -> None:
        self.api_client = api_client
        self.registry = registry or BlobRegistry()
        self.placeholder = ImageHandle.placeholder(placeholder_url or settings.PLACEHOLDER_IMAGE_URL)
        self._live: dict[str, ImageHandle] = {}

    async def acquire(self, product_id: Any) -> ImageHandle:
        try:
            image = await self.api_client.get_product_image(product_id)
        except APIError as e:
            logger.warning(f"Image for product {product_id} unavailable, using placeholder: {e}")
            return self.placeholder

        url = self.registry.create(image.content, image.content_type)
        handle = ImageHandle(
            url=url,
            product_id=product_id,
            content_type=image.content_type,
            size=len(image.content),
            _registry=self.registry,
        )
        self._live[url] = handle
        logger.debug(
            f"Acquired {url} for product {product_id} ({handle.size} bytes, "
            f"{self.live_count} live, {self.registry.live_bytes} bytes held)"
        )
        return handle

    def release(self, handle: Optional[ImageHandle]) -> bool:
        """Releases a handle. Returns False when there was nothing to free."""
        if handle is None or handle.is_placeholder or handle.released:
            return False
        handle.released = True
        self._live.pop(handle.url, None)
        if not self.registry.revoke(handle.url):
            logger.warning(f"Blob {handle.url} was already revoked")
            return False
        logger.debug(f"Released {handle.url} for product {handle.product_id}")
        return True

    def release_all(self) -> int:
        released = sum(1 for handle in list(self._live.values()) if self.release(handle))
        orphaned = self.registry.revoke_all()
        if orphaned:
            logger.warning(f"Revoked {orphaned} untracked image blobs")
        if released:
            logger.info(f"Released {released} outstanding image handles")
        return released

    @property
    def live_count(self) -> int:
        return len(self._live)


class ImageSlot:
    """
    Holds the single image a view instance is currently displaying.

    load() releases the previous handle before requesting the next one, and a handle
    that arrives after the slot moved on (a newer load, a placeholder, or close) is
    released on arrival, so the slot never owns more than one live handle.
    """

    def __init__(self, cache: ImageResourceCache) -> None:
        self.cache = cache
        self.handle: Optional[ImageHandle] = None
        self.closed = False
        self._generation = 0

    @property
    def url(self) -> Optional[str]:
        return self.handle.url if self.handle is not None else None

    def _supersede(self) -> int:
        self._generation += 1
        self.cache.release(self.handle)
        self.handle = None
        return self._generation

    async def load(self, product_id: Any) -> Optional[ImageHandle]:
        if self.closed:
            logger.debug(f"Ignoring image load for product {product_id} on a closed slot")
            return None

        generation = self._supersede()
        handle = await self.cache.acquire(product_id)

        if self.closed or generation != self._generation:
            logger.debug(f"Discarding late image for product {product_id}")
            self.cache.release(handle)
            return self.handle

        self.handle = handle
        return handle

    def show_placeholder(self) -> ImageHandle:
        self._supersede()
        self.handle = self.cache.placeholder
        return self.handle

    def close(self) -> None:
        if self.closed:
            return
        self._supersede()
        self.closed = True


class ProductImageGallery:
    """Owns one image handle per product for a listing view."""

    def __init__(self, cache: ImageResourceCache) -> None:
        self.cache = cache
        self.handles: dict[Any, ImageHandle] = {}
        self.closed = False
        self._generation = 0

    async def load(self, products: Iterable[Product]) -> dict[Any, ImageHandle]:
        if self.closed:
            return {}

        # One handle per product id
        products = list({product.id: product for product in products}.values())
        self._generation += 1
        generation = self._generation

        results = await asyncio.gather(
            *(self.cache.acquire(product.id) for product in products), return_exceptions=True
        )
        acquired = {
            product.id: result for product, result in zip(products, results) if isinstance(result, ImageHandle)
        }
        failures = [result for result in results if isinstance(result, BaseException)]

        if failures or self.closed or generation != self._generation:
            for handle in acquired.values():
                self.cache.release(handle)
            if failures:
                raise failures[0]
            logger.debug("Discarding superseded gallery images")
            return self.handles

        previous, self.handles = self.handles, acquired
        for handle in previous.values():
            self.cache.release(handle)
        return self.handles

    def url_for(self, product_id: Any) -> str:
        handle = self.handles.get(product_id)
        return handle.url if handle is not None else self.cache.placeholder.url

    def close(self) -> None:
        self.closed = True
        self._generation += 1
        for handle in self.handles.values():
            self.cache.release(handle)
        self.handles = {}
