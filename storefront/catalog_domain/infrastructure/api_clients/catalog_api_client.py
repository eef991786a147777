"""Client for the remote catalog API."""

import asyncio
import json
import logging
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from storefront.catalog_domain.domain.entities.product import Product
from storefront.common.config.settings import settings
from storefront.common.dtos.product_dtos import ProductDTO, ProductImageDTO
from storefront.common.exceptions.custom_exceptions import (
    APIError,
    ProductNotFoundError,
    TransientFetchError,
)

logger = logging.getLogger(__name__)

ACCEPTED_IMAGE_CONTENT_TYPES = ("image/", "application/octet-stream")


class CatalogApiClient:
    """
    Talks to the catalog service over HTTP.

    The blocking requests session runs in a worker thread so callers on the event loop
    only suspend their own task while a request is in flight.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> None:
        self.base_url = (base_url or settings.CATALOG_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CATALOG_API_TIMEOUT

        # Configure session with connection pooling and retry strategy
        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries if max_retries is not None else settings.CATALOG_API_MAX_RETRIES,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS", "PUT", "DELETE"],
            backoff_factor=1,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=10, pool_maxsize=10)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        # The catalog is unauthenticated
        self.session.headers.pop("Authorization", None)

    def _request(
        self,
        method: str,
        path: str,
        error_cls: type[APIError] = APIError,
        not_found_id: Any = None,
        **kwargs: Any,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response
        except requests.exceptions.Timeout as e:
            raise error_cls(f"{method} {path} timed out", e)
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            if status_code == 404 and not_found_id is not None:
                raise ProductNotFoundError(not_found_id, e)
            raise error_cls(f"{method} {path} failed", e, status_code=status_code)
        except requests.exceptions.RequestException as e:
            raise error_cls(f"{method} {path} failed: {e}", e)

    @staticmethod
    def _decode_json(response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise TransientFetchError(f"Failed to decode JSON response from {path}", e)

    def _list_products(self) -> list[Product]:
        response = self._request("GET", "/products", error_cls=TransientFetchError)
        data = self._decode_json(response, "/products")
        if not isinstance(data, list):
            raise TransientFetchError(f"Expected a list of products, got {type(data).__name__}")
        try:
            return [Product.from_dto(ProductDTO.from_api_response(item)) for item in data]
        except (ValueError, TypeError) as e:
            raise TransientFetchError("Malformed product in catalog listing", e)

    def _get_product(self, product_id: Any) -> Product:
        path = f"/product/{product_id}"
        response = self._request("GET", path, error_cls=TransientFetchError, not_found_id=product_id)
        data = self._decode_json(response, path)
        if not data:
            # Some catalog builds answer 200 with an empty body for unknown ids
            raise ProductNotFoundError(product_id)
        try:
            return Product.from_dto(ProductDTO.from_api_response(data))
        except (ValueError, TypeError) as e:
            raise TransientFetchError(f"Malformed product payload for {product_id}", e)

    def _get_product_image(self, product_id: Any) -> ProductImageDTO:
        path = f"/product/{product_id}/image"
        response = self._request("GET", path, error_cls=TransientFetchError, not_found_id=product_id)
        content = response.content
        content_type = response.headers.get("Content-Type", "application/octet-stream").split(";")[0].strip()
        if not content:
            raise TransientFetchError(f"Empty image payload for product {product_id}")
        if not content_type.startswith(ACCEPTED_IMAGE_CONTENT_TYPES):
            raise TransientFetchError(f"Unexpected image content type '{content_type}' for product {product_id}")
        return ProductImageDTO(product_id=product_id, content=content, content_type=content_type)

    @staticmethod
    def _multipart(product: ProductDTO, image: Optional[tuple[str, bytes, str]]) -> dict[str, tuple]:
        files: dict[str, tuple] = {
            "product": (None, json.dumps(product.to_api_payload()), "application/json"),
        }
        if image is not None:
            filename, content, content_type = image
            files["imageFile"] = (filename, content, content_type)
        return files

    def _create_product(self, product: ProductDTO, image: Optional[tuple[str, bytes, str]]) -> Optional[ProductDTO]:
        response = self._request("POST", "/product", files=self._multipart(product, image))
        return self._optional_product(response)

    def _update_product(
        self, product_id: Any, product: ProductDTO, image: Optional[tuple[str, bytes, str]]
    ) -> Optional[ProductDTO]:
        response = self._request(
            "PUT", f"/product/{product_id}", not_found_id=product_id, files=self._multipart(product, image)
        )
        return self._optional_product(response)

    def _delete_product(self, product_id: Any) -> None:
        self._request("DELETE", f"/product/{product_id}", not_found_id=product_id)

    @staticmethod
    def _optional_product(response: requests.Response) -> Optional[ProductDTO]:
        """Mutation endpoints may answer with the stored record or with a plain text message."""
        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict) and data.get("id") is not None:
            return ProductDTO.from_api_response(data)
        return None

    async def list_products(self) -> list[Product]:
        return await asyncio.to_thread(self._list_products)

    async def get_product(self, product_id: Any) -> Product:
        return await asyncio.to_thread(self._get_product, product_id)

    async def get_product_image(self, product_id: Any) -> ProductImageDTO:
        return await asyncio.to_thread(self._get_product_image, product_id)

    async def create_product(
        self, product: ProductDTO, image: Optional[tuple[str, bytes, str]] = None
    ) -> Optional[ProductDTO]:
        return await asyncio.to_thread(self._create_product, product, image)

    async def update_product(
        self, product_id: Any, product: ProductDTO, image: Optional[tuple[str, bytes, str]] = None
    ) -> Optional[ProductDTO]:
        return await asyncio.to_thread(self._update_product, product_id, product, image)

    async def delete_product(self, product_id: Any) -> None:
        await asyncio.to_thread(self._delete_product, product_id)

    def close(self) -> None:
        self.session.close()

    def __del__(self) -> None:
        """Clean up the session when the object is destroyed."""
        if hasattr(self, "session"):
            self.session.close()
