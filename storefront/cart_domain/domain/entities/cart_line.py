"""Cart line entity."""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any

from storefront.catalog_domain.domain.entities.product import Product
from storefront.common.dtos.product_dtos import ProductDTO


@dataclass(frozen=True)
class CartLine:
    """One product's snapshot plus its cart-local quantity."""

    product: Product  # Snapshot taken when the product was first added
    quantity: int = 1

    def __post_init__(self) -> None:
        """Post-initialization for validation."""
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError(f"Cart quantity must be an integer, got {self.quantity!r}.")
        if self.quantity < 1:
            raise ValueError("Cart quantity must be positive.")

    @property
    def product_id(self) -> Any:
        return self.product.id

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    def incremented(self) -> "CartLine":
        return replace(self, quantity=self.quantity + 1)

    def to_storage_dict(self) -> dict[str, Any]:
        """Serializes the line into the JSON-compatible cart snapshot format."""
        data = self.product.to_dto().to_api_payload()
        data["id"] = self.product.id
        data["imageName"] = self.product.image_name
        data["stock"] = self.product.quantity
        data["quantity"] = self.quantity
        return data

    @classmethod
    def from_storage_dict(cls, data: dict[str, Any]) -> "CartLine":
        """Rebuilds a line from a stored snapshot entry. Raises ValueError on malformed entries."""
        if not isinstance(data, dict):
            raise ValueError(f"Cart entry must be an object, got {type(data).__name__}")
        if "quantity" not in data:
            raise ValueError("Cart entry has no quantity")

        product_data = dict(data)
        product_data["quantity"] = data.get("stock") or 0
        product = Product.from_dto(ProductDTO.from_api_response(product_data))
        return cls(product=product, quantity=data["quantity"])
