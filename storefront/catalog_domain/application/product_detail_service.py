"""Loads one product and its image for the detail view."""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional

from storefront.catalog_domain.domain.entities.product import Product
from storefront.catalog_domain.infrastructure.api_clients.catalog_api_client import CatalogApiClient
from storefront.common.exceptions.custom_exceptions import APIError, ProductNotFoundError
from storefront.image_domain.application.image_resource_cache import ImageResourceCache, ImageSlot
from storefront.image_domain.domain.entities.image_handle import ImageHandle

logger = logging.getLogger(__name__)


class DetailStatus(enum.Enum):
    LOADING = "loading"
    LOADED = "loaded"
    NOT_FOUND = "not_found"


@dataclass
class ProductDetailState:
    product_id: Any
    status: DetailStatus = DetailStatus.LOADING
    product: Optional[Product] = None
    image: Optional[ImageHandle] = None
    error: Optional[str] = None

    @property
    def is_loaded(self) -> bool:
        return self.status is DetailStatus.LOADED

    @property
    def is_not_found(self) -> bool:
        return self.status is DetailStatus.NOT_FOUND

    def require_product(self) -> Product:
        """Returns the loaded product, or raises ProductNotFoundError so the caller can redirect."""
        if self.status is DetailStatus.NOT_FOUND:
            raise ProductNotFoundError(self.product_id)
        if self.product is None:
            raise ValueError(f"Product {self.product_id} is still loading")
        return self.product


class ProductDetailLoader:
    """
    State machine for one detail view: loading -> loaded | not_found.

    The loader owns a single image slot. Switching to another product id restarts the
    machine and releases the previous image; close() releases it on unmount.
    """

    def __init__(self, api_client: CatalogApiClient, image_cache: ImageResourceCache) -> None:
        self.api_client = api_client
        self.image_slot = ImageSlot(image_cache)
        self.state: Optional[ProductDetailState] = None

    async def load(self, product_id: Any) -> ProductDetailState:
        current = self.state
        if current is not None and current.product_id == product_id and current.status is not DetailStatus.LOADING:
            # loaded and not_found are terminal for an id
            return current

        state = ProductDetailState(product_id=product_id)
        self.state = state
        self.image_slot.show_placeholder()

        try:
            product = await self.api_client.get_product(product_id)
        except APIError as e:
            if self.state is not state:
                return state
            logger.error(f"Error fetching product details for {product_id}: {e}")
            state.status = DetailStatus.NOT_FOUND
            state.error = e.message
            state.image = None
            return state

        if self.state is not state:
            logger.debug(f"Discarding detail response for superseded product {product_id}")
            return state

        state.product = product
        state.status = DetailStatus.LOADED

        if product.has_image:
            await self.image_slot.load(product_id)
        if self.state is state and not self.image_slot.closed:
            state.image = self.image_slot.handle or self.image_slot.show_placeholder()
        return state

    def close(self) -> None:
        self.image_slot.close()
        if self.state is not None:
            self.state.image = None
