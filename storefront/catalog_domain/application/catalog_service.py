# storefront/catalog_domain/application/catalog_service.py
"""Application service holding the product listing."""

import logging
from typing import Any, Optional

from storefront.catalog_domain.domain.entities.product import Product
from storefront.catalog_domain.infrastructure.api_clients.catalog_api_client import CatalogApiClient
from storefront.common.exceptions.custom_exceptions import APIError

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_ERROR = "Error fetching products."


class CatalogService:
    """
    In-memory product list plus the error of the last failed refresh.

    Every refresh() takes a request token. Only the response carrying the latest issued
    token is applied; earlier responses that resolve later are discarded.
    """

    def __init__(self, api_client: CatalogApiClient) -> None:
        self.api_client = api_client
        self._products: list[Product] = []
        self.last_error: Optional[str] = None
        self._latest_token = 0

    @property
    def products(self) -> tuple[Product, ...]:
        return tuple(self._products)

    async def refresh(self) -> bool:
        """Reloads the product list. Returns True if this call's response was applied."""
        self._latest_token += 1
        token = self._latest_token

        try:
            products = await self.api_client.list_products()
        except APIError as e:
            if token != self._latest_token:
                logger.debug(f"Discarding stale refresh failure (token {token} < {self._latest_token})")
                return False
            # The previous list stays visible alongside the error
            self.last_error = e.message or DEFAULT_REFRESH_ERROR
            logger.error(f"Catalog refresh failed: {e}")
            return False

        if token != self._latest_token:
            logger.debug(f"Discarding stale refresh response (token {token} < {self._latest_token})")
            return False

        self._products = list(products)
        self.last_error = None
        logger.info(f"Catalog refreshed with {len(self._products)} products")
        return True

    def update_stock(self, product_id: Any, new_quantity: int) -> bool:
        """Local-only stock update; the next refresh() brings the authoritative value."""
        if new_quantity < 0:
            raise ValueError("Quantity cannot be negative.")
        for index, product in enumerate(self._products):
            if product.id == product_id:
                self._products[index] = product.with_quantity(new_quantity)
                return True
        logger.debug(f"update_stock ignored unknown product {product_id}")
        return False

    def get_product(self, product_id: Any) -> Optional[Product]:
        return next((product for product in self._products if product.id == product_id), None)

    def categories(self) -> list[str]:
        return sorted({product.category for product in self._products if product.category})

    def filter_products(self, category: Optional[str] = None, only_available: bool = False) -> list[Product]:
        """Listing filter: optional category match and availability toggle."""
        return [
            product
            for product in self._products
            if (not category or product.category == category) and (not only_available or product.available)
        ]
