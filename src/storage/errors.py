from __future__ import annotations


class StorageError(Exception):
    """Base class for key/value storage failures."""


class StorageUnavailable(StorageError):
    """Storage is disabled or the backend failed."""


class StorageQuotaExceeded(StorageError):
    """A write would exceed the configured quota."""

    def __init__(self, key: str, size: int, quota: int):
        super().__init__(
            f"Writing {size} bytes to '{key}' exceeds quota of {quota} bytes"
        )
        self.key = key
        self.size = size
        self.quota = quota
