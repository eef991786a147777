# tests/conftest.py
from datetime import date
from decimal import Decimal
from unittest.mock import Mock

import pytest

from storefront.catalog_domain.domain.entities.product import Product
from storefront.catalog_domain.infrastructure.api_clients.catalog_api_client import CatalogApiClient
from storefront.common.config.settings import settings
from storefront.common.dtos.product_dtos import ProductImageDTO
from storefront.common.storage.key_value_storage import InMemoryKeyValueStorage
from storefront.common.storage.persistent_store import PersistentStore
from storefront.image_domain.application.image_resource_cache import ImageResourceCache

PLACEHOLDER_URL = "https://placehold.co/test/No+Image"


@pytest.fixture(autouse=True)
def mock_settings_catalog_info(mocker) -> None:
    """Pins catalog settings so tests never depend on the local .env."""
    mocker.patch.object(settings, "CATALOG_API_BASE_URL", "https://catalog.example.com/api")
    mocker.patch.object(settings, "PLACEHOLDER_IMAGE_URL", PLACEHOLDER_URL)
    mocker.patch.object(settings, "CART_STORAGE_KEY", "cart")


@pytest.fixture
def mock_catalog_api_client() -> Mock:
    """Mock for CatalogApiClient; its async methods become AsyncMocks through the spec."""
    client = Mock(spec=CatalogApiClient)
    client.base_url = "https://catalog.example.com/api"
    return client


@pytest.fixture
def memory_storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def persistent_store(memory_storage) -> PersistentStore:
    return PersistentStore(memory_storage)


@pytest.fixture
def image_cache(mock_catalog_api_client) -> ImageResourceCache:
    return ImageResourceCache(mock_catalog_api_client)


@pytest.fixture
def image_payload():
    """Builds the image endpoint's return value for a product id."""

    def _payload(product_id, content: bytes = b"\x89PNG\r\n\x1a\nfake") -> ProductImageDTO:
        return ProductImageDTO(product_id=product_id, content=content, content_type="image/png")

    return _payload


@pytest.fixture
def sample_laptop() -> Product:
    return Product(
        id=1,
        name="Zenbook 14",
        brand="Asus",
        category="Laptop",
        description="14 inch ultrabook",
        price=Decimal("999.99"),
        quantity=12,
        available=True,
        release_date=date(2024, 3, 1),
        image_name="zenbook.png",
    )


@pytest.fixture
def sample_headphones() -> Product:
    return Product(
        id=2,
        name="WH-1000XM5",
        brand="Sony",
        category="Headphone",
        description="Noise cancelling headphones",
        price=Decimal("349.00"),
        quantity=0,
        available=False,
        release_date=date(2023, 5, 12),
        image_name=None,
    )


@pytest.fixture
def sample_phone() -> Product:
    return Product(
        id=3,
        name="Pixel 8",
        brand="Google",
        category="Mobile",
        description="Android phone",
        price=Decimal("699.00"),
        quantity=40,
        available=True,
        release_date=date(2023, 10, 4),
        image_name="pixel8.jpg",
    )


@pytest.fixture
def sample_products(sample_laptop, sample_headphones, sample_phone) -> list[Product]:
    return [sample_laptop, sample_headphones, sample_phone]
