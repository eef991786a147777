# storefront/session/storefront_session.py
"""Process-wide state container shared by every storefront view."""

import logging
from typing import Any, Optional

from storefront.cart_domain.application.cart_service import CartService
from storefront.cart_domain.domain.entities.cart_line import CartLine
from storefront.catalog_domain.application.catalog_admin_service import CatalogAdminService
from storefront.catalog_domain.application.catalog_service import CatalogService
from storefront.catalog_domain.application.product_detail_service import ProductDetailLoader
from storefront.catalog_domain.domain.entities.product import Product
from storefront.catalog_domain.infrastructure.api_clients.catalog_api_client import CatalogApiClient
from storefront.common.config.settings import settings
from storefront.common.exceptions.custom_exceptions import SessionClosedError
from storefront.common.storage.key_value_storage import FileKeyValueStorage, IKeyValueStorage
from storefront.common.storage.persistent_store import PersistentStore
from storefront.image_domain.application.image_resource_cache import ImageResourceCache, ProductImageGallery

logger = logging.getLogger(__name__)


class StorefrontSession:
    """
    Shared cart and catalog state for one application session.

    Build it once with create() (or wire collaborators by hand), hand the same instance
    to every view, and call close() when the session ends. close() releases every
    outstanding image handle and waits for pending cart writes.
    """

    def __init__(
        self,
        api_client: CatalogApiClient,
        catalog: CatalogService,
        cart_service: CartService,
        image_cache: ImageResourceCache,
    ) -> None:
        self.api_client = api_client
        self.catalog = catalog
        self.cart_service = cart_service
        self.images = image_cache
        self.admin = CatalogAdminService(api_client, catalog, cart_service)
        self.closed = False

    @classmethod
    def create(
        cls,
        api_client: Optional[CatalogApiClient] = None,
        storage: Optional[IKeyValueStorage] = None,
    ) -> "StorefrontSession":
        """Wires a session from settings. Explicit collaborators override the defaults."""
        api_client = api_client or CatalogApiClient()
        storage = storage or FileKeyValueStorage(settings.STORAGE_DIR)
        session = cls(
            api_client=api_client,
            catalog=CatalogService(api_client),
            cart_service=CartService(PersistentStore(storage)),
            image_cache=ImageResourceCache(api_client),
        )
        logger.info(f"Storefront session started against {api_client.base_url}")
        return session

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosedError("Storefront session is closed")

    @property
    def products(self) -> tuple[Product, ...]:
        return self.catalog.products

    @property
    def last_error(self) -> Optional[str]:
        return self.catalog.last_error

    @property
    def cart(self) -> tuple[CartLine, ...]:
        return self.cart_service.cart

    def add_to_cart(self, product: Product) -> CartLine:
        self._ensure_open()
        return self.cart_service.add_to_cart(product)

    def remove_from_cart(self, product_id: Any) -> bool:
        self._ensure_open()
        return self.cart_service.remove_from_cart(product_id)

    def clear_cart(self) -> None:
        self._ensure_open()
        self.cart_service.clear_cart()

    async def refresh(self) -> bool:
        self._ensure_open()
        return await self.catalog.refresh()

    def update_stock(self, product_id: Any, new_quantity: int) -> bool:
        self._ensure_open()
        return self.catalog.update_stock(product_id, new_quantity)

    def detail_loader(self) -> ProductDetailLoader:
        """A loader for one detail view; the view must close() it on unmount."""
        self._ensure_open()
        return ProductDetailLoader(self.api_client, self.images)

    def image_gallery(self) -> ProductImageGallery:
        """Image owner for one listing view; the view must close() it on unmount."""
        self._ensure_open()
        return ProductImageGallery(self.images)

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.images.release_all()
        await self.cart_service.flush()
        self.api_client.close()
        logger.info("Storefront session closed")

    async def __aenter__(self) -> "StorefrontSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
