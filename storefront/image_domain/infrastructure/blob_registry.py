"""In-process blob store that hands out scoped object URLs for image bytes."""

import logging
import uuid
from dataclasses import dataclass

from storefront.common.exceptions.custom_exceptions import ImageHandleReleasedError

logger = logging.getLogger(__name__)

BLOB_URL_PREFIX = "blob:storefront/"


@dataclass
class _Blob:
    content: bytes
    content_type: str


class BlobRegistry:
    """Maps blob URLs to image bytes until the URL is revoked."""

    def __init__(self) -> None:
        self._blobs: dict[str, _Blob] = {}

    def create(self, content: bytes, content_type: str) -> str:
        url = f"{BLOB_URL_PREFIX}{uuid.uuid4()}"
        self._blobs[url] = _Blob(content=content, content_type=content_type)
        return url

    def resolve(self, url: str) -> bytes:
        blob = self._blobs.get(url)
        if blob is None:
            raise ImageHandleReleasedError(f"Blob URL {url} has been revoked")
        return blob.content

    def revoke(self, url: str) -> bool:
        """Frees a blob. Returns False if the URL was unknown or already revoked."""
        return self._blobs.pop(url, None) is not None

    def revoke_all(self) -> int:
        count = len(self._blobs)
        self._blobs.clear()
        return count

    @property
    def live_count(self) -> int:
        return len(self._blobs)

    @property
    def live_bytes(self) -> int:
        return sum(len(blob.content) for blob in self._blobs.values())
