"""Data Transfer Objects for catalog product data."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

TRUE_STRINGS = {"true", "1", "yes"}
FALSE_STRINGS = {"false", "0", "no", ""}


def parse_bool(value: Any) -> bool:
    """Reads a JSON boolean, tolerating the string and 0/1 forms some catalog builds send."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_STRINGS:
            return True
        if normalized in FALSE_STRINGS:
            return False
    raise ValueError(f"Invalid boolean value: {value!r}")


@dataclass
class ProductDTO:
    """Wire representation of a product as the catalog API sends and accepts it."""

    id: Any
    name: str = ""
    brand: str = ""
    category: str = ""
    desc: str = ""
    price: Any = 0
    quantity: int = 0
    available: bool = False
    releaseDate: Optional[str] = None
    imageName: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "ProductDTO":
        """Creates ProductDTO from a catalog API response item."""
        if not isinstance(data, dict):
            raise ValueError(f"Product payload must be an object, got {type(data).__name__}")
        if data.get("id") is None:
            raise ValueError("Product payload has no id")

        # Older catalog builds send the long text as 'description'
        description = data.get("desc")
        if description is None:
            description = data.get("description")

        return cls(
            id=data["id"],
            name=data.get("name") or "",
            brand=data.get("brand") or "",
            category=data.get("category") or "",
            desc=description or "",
            price=data.get("price") if data.get("price") is not None else 0,
            quantity=data.get("quantity") if data.get("quantity") is not None else 0,
            available=parse_bool(data.get("available")),
            releaseDate=data.get("releaseDate"),
            imageName=data.get("imageName") or None,
        )

    def to_api_payload(self) -> dict[str, Any]:
        """Serializes the DTO for create/update requests."""
        payload = {
            "name": self.name,
            "brand": self.brand,
            "category": self.category,
            "desc": self.desc,
            "price": str(self.price),
            "quantity": self.quantity,
            "available": self.available,
            "releaseDate": self.releaseDate,
        }
        if self.id is not None:
            payload["id"] = self.id
        if self.imageName:
            payload["imageName"] = self.imageName
        return payload


@dataclass
class ProductImageDTO:
    """Binary image payload returned by the catalog image endpoint."""

    product_id: Any
    content: bytes
    content_type: str = "application/octet-stream"
