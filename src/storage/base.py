from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional

from storage.errors import StorageQuotaExceeded


class KeyValueBackend(ABC):
    """
    Durable per-origin string slot shared by every tab of one origin.

    Values are whole strings; writes overwrite the previous value.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...

    def close(self) -> None:
        pass

    def _check_quota(self, key: str, value: str, current: Dict[str, int]) -> None:
        """
        Raise StorageQuotaExceeded if storing value under key would push
        the total size past quota_bytes.

        Args:
            current: Size in bytes of every stored item, by key.
        """
        if self.quota_bytes is None:
            return
        size = len(key.encode("utf-8")) + len(value.encode("utf-8"))
        others = sum(n for k, n in current.items() if k != key)
        if others + size > self.quota_bytes:
            raise StorageQuotaExceeded(key, size, self.quota_bytes)


class MemoryBackend(KeyValueBackend):
    """Dict-backed slot, lost when the process exits."""

    def __init__(self, quota_bytes: Optional[int] = None):
        super().__init__(quota_bytes)
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        sizes = {
            k: len(k.encode("utf-8")) + len(v.encode("utf-8"))
            for k, v in self._items.items()
        }
        self._check_quota(key, value, sizes)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
