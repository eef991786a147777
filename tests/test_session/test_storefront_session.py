"""End-to-end tests for the StorefrontSession state container."""

import json

import pytest

from storefront.common.exceptions.custom_exceptions import SessionClosedError, TransientFetchError
from storefront.session.storefront_session import StorefrontSession


@pytest.fixture
def session(mock_catalog_api_client, memory_storage) -> StorefrontSession:
    return StorefrontSession.create(api_client=mock_catalog_api_client, storage=memory_storage)


def test_adding_same_product_twice_merges_line(session, sample_laptop) -> None:
    session.add_to_cart(sample_laptop)
    session.add_to_cart(sample_laptop)

    assert [(line.product_id, line.quantity) for line in session.cart] == [(1, 2)]


def test_remove_on_empty_cart_is_noop(session) -> None:
    session.remove_from_cart(1)

    assert session.cart == ()


@pytest.mark.asyncio
async def test_first_refresh_network_failure_keeps_empty_list(session, mock_catalog_api_client) -> None:
    mock_catalog_api_client.list_products.side_effect = TransientFetchError("GET /products failed: Network Error")

    await session.refresh()

    assert session.products == ()
    assert session.last_error
    assert not session.closed


@pytest.mark.asyncio
async def test_detail_without_image_name_never_fetches_image(
    session, mock_catalog_api_client, sample_headphones
) -> None:
    mock_catalog_api_client.get_product.return_value = sample_headphones
    loader = session.detail_loader()

    state = await loader.load(2)

    assert state.is_loaded
    assert state.image.is_placeholder
    mock_catalog_api_client.get_product_image.assert_not_called()


@pytest.mark.asyncio
async def test_update_stock_through_session(session, mock_catalog_api_client, sample_products) -> None:
    mock_catalog_api_client.list_products.return_value = sample_products
    await session.refresh()

    session.update_stock(3, 39)

    assert session.catalog.get_product(3).quantity == 39
    assert session.last_error is None


@pytest.mark.asyncio
async def test_close_releases_outstanding_handles_and_flushes_cart(
    session, mock_catalog_api_client, memory_storage, sample_products, sample_laptop, image_payload
) -> None:
    mock_catalog_api_client.get_product_image.side_effect = lambda product_id: image_payload(product_id)
    mock_catalog_api_client.get_product.return_value = sample_laptop
    gallery = session.image_gallery()
    await gallery.load(sample_products)
    loader = session.detail_loader()
    await loader.load(1)
    session.add_to_cart(sample_laptop)

    assert session.images.live_count == 4

    await session.close()

    assert session.images.live_count == 0
    assert session.images.registry.live_count == 0
    assert json.loads(memory_storage.get_item("cart"))[0]["id"] == 1
    mock_catalog_api_client.close.assert_called_once()

    # Views unmounting after teardown stay harmless
    gallery.close()
    loader.close()


@pytest.mark.asyncio
async def test_closed_session_rejects_use(session, sample_laptop) -> None:
    await session.close()
    await session.close()

    with pytest.raises(SessionClosedError):
        session.add_to_cart(sample_laptop)
    with pytest.raises(SessionClosedError):
        await session.refresh()


@pytest.mark.asyncio
async def test_async_context_manager_closes(mock_catalog_api_client, memory_storage) -> None:
    async with StorefrontSession.create(api_client=mock_catalog_api_client, storage=memory_storage) as session:
        assert not session.closed

    assert session.closed


@pytest.mark.asyncio
async def test_delete_flow_clears_cart_line_and_refreshes(
    session, mock_catalog_api_client, sample_laptop, sample_phone
) -> None:
    session.add_to_cart(sample_laptop)
    mock_catalog_api_client.list_products.return_value = [sample_phone]

    await session.admin.delete_product(1)
    await session.cart_service.flush()

    assert session.cart == ()
    assert session.products == (sample_phone,)
