"""Operator actions that mutate the remote catalog."""

import logging
from typing import Any, Optional

from storefront.cart_domain.application.cart_service import CartService
from storefront.catalog_domain.application.catalog_service import CatalogService
from storefront.catalog_domain.domain.entities.product import Product
from storefront.catalog_domain.infrastructure.api_clients.catalog_api_client import CatalogApiClient
from storefront.common.dtos.product_dtos import ProductDTO

logger = logging.getLogger(__name__)


class CatalogAdminService:
    """Creates, updates and deletes catalog products, then resyncs local state."""

    def __init__(self, api_client: CatalogApiClient, catalog: CatalogService, cart: CartService) -> None:
        self.api_client = api_client
        self.catalog = catalog
        self.cart = cart

    async def create_product(
        self, product: Product, image: Optional[tuple[str, bytes, str]] = None
    ) -> Optional[ProductDTO]:
        """
        Creates a product with an optional (filename, bytes, content type) image.

        Raises APIError on failure; mutations are not retried or queued.
        """
        dto = product.to_dto()
        dto.id = None  # The catalog assigns ids
        created = await self.api_client.create_product(dto, image)
        logger.info(f"Created product '{product.name}'")
        await self.catalog.refresh()
        return created

    async def update_product(
        self, product_id: Any, product: Product, image: Optional[tuple[str, bytes, str]] = None
    ) -> Optional[ProductDTO]:
        updated = await self.api_client.update_product(product_id, product.to_dto(), image)
        logger.info(f"Updated product {product_id}")
        await self.catalog.refresh()
        return updated

    async def delete_product(self, product_id: Any) -> None:
        """Deletes a product, drops its cart line and reloads the listing."""
        await self.api_client.delete_product(product_id)
        logger.info(f"Deleted product {product_id}")
        self.cart.remove_from_cart(product_id)
        await self.catalog.refresh()
