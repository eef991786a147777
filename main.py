"""Main application entry point for the storefront client."""

import asyncio
import logging

from storefront.common.config.settings import settings
from storefront.common.logger_config import setup_logging
from storefront.session.storefront_session import StorefrontSession

logger = logging.getLogger(__name__)


async def run_storefront_listing() -> None:
    """
    Opens a session, loads the catalog with its images and prints the listing
    alongside the persisted cart.
    """
    async with StorefrontSession.create() as session:
        await session.refresh()

        if session.last_error:
            print(f"Something went wrong. Please try again later. ({session.last_error})")

        gallery = session.image_gallery()
        try:
            await gallery.load(session.products)

            print(f"\n--- {len(session.products)} products from {settings.CATALOG_API_BASE_URL} ---")
            for product in session.products:
                stock_label = "Add to Cart" if product.available else "Out of Stock"
                print(
                    f"  [{product.id}] {product.name.upper()} ~ {product.brand} | {product.category} | "
                    f"{product.price} | stock {product.quantity} | {stock_label} | {gallery.url_for(product.id)}"
                )
        finally:
            gallery.close()

        print(f"\n--- Cart ({session.cart_service.total_items} items) ---")
        for line in session.cart:
            print(f"  {line.product.name} x{line.quantity} = {line.line_total}")
        print(f"  Total: {session.cart_service.total_price}")


if __name__ == "__main__":
    setup_logging()
    logger.info("Storefront client started.")
    asyncio.run(run_storefront_listing())
