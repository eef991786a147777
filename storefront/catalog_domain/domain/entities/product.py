"""Product entity."""

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from storefront.common.dtos.product_dtos import ProductDTO
from storefront.common.utils.date_utils import format_release_date, parse_release_date


@dataclass(frozen=True)  # Catalog records are read-only copies on the client
class Product:
    """A catalog product as held by the client."""

    id: Any
    name: str = ""
    brand: str = ""
    category: str = ""
    description: str = ""
    price: Decimal = Decimal("0")
    quantity: int = 0
    available: bool = False
    release_date: Optional[date] = None
    image_name: Optional[str] = None

    def __post_init__(self) -> None:
        """Post-initialization for validation."""
        if not isinstance(self.price, Decimal):
            try:
                object.__setattr__(self, "price", Decimal(str(self.price)))
            except InvalidOperation as e:
                raise ValueError(f"Invalid price: {self.price!r}") from e
        if not self.price.is_finite():
            raise ValueError(f"Price must be a finite number, got {self.price!r}.")
        if self.price < 0:
            raise ValueError("Price cannot be negative.")
        if self.quantity < 0:
            raise ValueError("Quantity cannot be negative.")

    @property
    def has_image(self) -> bool:
        return bool(self.image_name)

    def with_quantity(self, quantity: int) -> "Product":
        """Returns a copy of the product with a different stock quantity."""
        return replace(self, quantity=quantity)

    @classmethod
    def from_dto(cls, dto: ProductDTO) -> "Product":
        return cls(
            id=dto.id,
            name=dto.name,
            brand=dto.brand,
            category=dto.category,
            description=dto.desc,
            price=dto.price,
            quantity=int(dto.quantity),
            available=dto.available,
            release_date=parse_release_date(dto.releaseDate),
            image_name=dto.imageName,
        )

    def to_dto(self) -> ProductDTO:
        return ProductDTO(
            id=self.id,
            name=self.name,
            brand=self.brand,
            category=self.category,
            desc=self.description,
            price=self.price,
            quantity=self.quantity,
            available=self.available,
            releaseDate=format_release_date(self.release_date),
            imageName=self.image_name,
        )
