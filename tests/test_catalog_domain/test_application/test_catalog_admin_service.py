"""Tests for the CatalogAdminService."""

from decimal import Decimal

import pytest

from storefront.cart_domain.application.cart_service import CartService
from storefront.catalog_domain.application.catalog_admin_service import CatalogAdminService
from storefront.catalog_domain.application.catalog_service import CatalogService
from storefront.catalog_domain.domain.entities.product import Product
from storefront.common.dtos.product_dtos import ProductDTO
from storefront.common.exceptions.custom_exceptions import APIError


@pytest.fixture
def catalog_service(mock_catalog_api_client) -> CatalogService:
    return CatalogService(mock_catalog_api_client)


@pytest.fixture
def cart_service(persistent_store) -> CartService:
    return CartService(persistent_store)


@pytest.fixture
def admin_service(mock_catalog_api_client, catalog_service, cart_service) -> CatalogAdminService:
    return CatalogAdminService(mock_catalog_api_client, catalog_service, cart_service)


@pytest.mark.asyncio
async def test_delete_removes_cart_line_and_refreshes(
    admin_service, mock_catalog_api_client, cart_service, catalog_service, sample_laptop, sample_phone
) -> None:
    cart_service.add_to_cart(sample_laptop)
    cart_service.add_to_cart(sample_phone)
    mock_catalog_api_client.list_products.return_value = [sample_phone]

    await admin_service.delete_product(1)
    await cart_service.flush()

    mock_catalog_api_client.delete_product.assert_awaited_once_with(1)
    assert [line.product_id for line in cart_service.cart] == [3]
    assert catalog_service.products == (sample_phone,)


@pytest.mark.asyncio
async def test_delete_failure_propagates_and_keeps_state(
    admin_service, mock_catalog_api_client, cart_service, sample_laptop
) -> None:
    cart_service.add_to_cart(sample_laptop)
    mock_catalog_api_client.delete_product.side_effect = APIError("DELETE /product/1 failed", status_code=500)

    with pytest.raises(APIError):
        await admin_service.delete_product(1)
    await cart_service.flush()

    assert cart_service.get_line(1) is not None
    mock_catalog_api_client.list_products.assert_not_called()


@pytest.mark.asyncio
async def test_create_product_strips_id_and_refreshes(
    admin_service, mock_catalog_api_client, catalog_service
) -> None:
    draft = Product(id=0, name="Kindle", brand="Amazon", price=Decimal("129.99"), quantity=4, available=True)
    mock_catalog_api_client.create_product.return_value = ProductDTO(id=10, name="Kindle")
    mock_catalog_api_client.list_products.return_value = [draft]
    image = ("kindle.png", b"png", "image/png")

    created = await admin_service.create_product(draft, image)

    sent_dto, sent_image = mock_catalog_api_client.create_product.await_args[0]
    assert sent_dto.id is None
    assert sent_dto.name == "Kindle"
    assert sent_image == image
    assert created.id == 10
    mock_catalog_api_client.list_products.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_product_sends_dto_and_refreshes(
    admin_service, mock_catalog_api_client, sample_laptop
) -> None:
    mock_catalog_api_client.update_product.return_value = None
    mock_catalog_api_client.list_products.return_value = [sample_laptop]

    await admin_service.update_product(1, sample_laptop)

    product_id, sent_dto, sent_image = mock_catalog_api_client.update_product.await_args[0]
    assert product_id == 1
    assert sent_dto.desc == "14 inch ultrabook"
    assert sent_image is None
    mock_catalog_api_client.list_products.assert_awaited_once()
