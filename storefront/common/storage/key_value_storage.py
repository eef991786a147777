# storefront/common/storage/key_value_storage.py
"""Durable key-value storage backends."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from storefront.common.exceptions.custom_exceptions import PersistenceError

logger = logging.getLogger(__name__)


class IKeyValueStorage(ABC):

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Returns the stored text for a key, or None if the key is absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Stores text under a key, replacing any previous value."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Removes a key. Removing an absent key is not an error."""
        pass


class InMemoryKeyValueStorage(IKeyValueStorage):
    """Process-local storage, used for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None, quota_bytes: int | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v.encode("utf-8")) for k, v in self._items.items() if k != key)
            if used + len(value.encode("utf-8")) > self.quota_bytes:
                raise PersistenceError(f"Quota of {self.quota_bytes} bytes exceeded while writing '{key}'")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileKeyValueStorage(IKeyValueStorage):
    """Stores each key as a UTF-8 text file inside a directory."""

    def __init__(self, directory: str | os.PathLike) -> None:
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read '{key}' from {path}", e)

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file first so readers never see a half-written value
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Could not write '{key}' to {path}", e)

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not remove '{key}' at {path}", e)
