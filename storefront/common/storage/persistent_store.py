"""JSON get/set/remove adapter over durable key-value storage."""

import json
import logging
from typing import Any

from storefront.common.exceptions.custom_exceptions import PersistenceError
from storefront.common.storage.key_value_storage import IKeyValueStorage

logger = logging.getLogger(__name__)


class PersistentStore:
    """
    Thin JSON wrapper over a key-value storage backend.

    Reads never raise: a missing key, a corrupted value or an unavailable backend all
    fall back to the caller's default. Writes are best-effort; failures are logged and
    reported through the boolean return value only, since in-memory state stays
    authoritative for the running session.
    """

    def __init__(self, storage: IKeyValueStorage) -> None:
        self.storage = storage

    def load(self, key: str, default: Any = None) -> Any:
        try:
            raw = self.storage.get_item(key)
        except (PersistenceError, OSError) as e:
            logger.warning(f"Storage unavailable while loading '{key}', using default: {e}")
            return default

        if raw is None:
            logger.debug(f"No stored value for '{key}'")
            return default

        try:
            value = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Stored value for '{key}' is corrupted, using default: {e}")
            return default

        if value is None:
            return default
        return value

    def save(self, key: str, value: Any) -> bool:
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Could not encode value for '{key}': {e}")
            return False

        try:
            self.storage.set_item(key, encoded)
        except (PersistenceError, OSError) as e:
            logger.error(f"Failed to persist '{key}': {e}")
            return False

        logger.debug(f"Persisted '{key}' ({len(encoded)} bytes)")
        return True

    def remove(self, key: str) -> bool:
        try:
            self.storage.remove_item(key)
        except (PersistenceError, OSError) as e:
            logger.error(f"Failed to remove '{key}': {e}")
            return False
        return True
