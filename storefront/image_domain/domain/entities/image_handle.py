"""Image handle entity."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from storefront.common.exceptions.custom_exceptions import ImageHandleReleasedError

if TYPE_CHECKING:
    from storefront.image_domain.infrastructure.blob_registry import BlobRegistry


@dataclass(eq=False)  # Handles compare by identity, two fetches of one image are distinct resources
class ImageHandle:
    """A transient reference to a decoded image blob, released exactly once."""

    url: str
    product_id: Any = None
    content_type: Optional[str] = None
    size: int = 0
    is_placeholder: bool = False
    released: bool = False
    _registry: Optional["BlobRegistry"] = field(default=None, repr=False)

    @classmethod
    def placeholder(cls, url: str) -> "ImageHandle":
        return cls(url=url, is_placeholder=True)

    @property
    def is_live(self) -> bool:
        return not self.is_placeholder and not self.released

    def read(self) -> bytes:
        """Returns the image bytes. Placeholders have no local bytes and return b''."""
        if self.released:
            raise ImageHandleReleasedError(f"Image handle {self.url} was already released")
        if self.is_placeholder or self._registry is None:
            return b""
        return self._registry.resolve(self.url)
