from __future__ import annotations

import uuid
from typing import Optional

from storage.base import KeyValueBackend
from storage.channel import StorageChange, StorageChannel


class StorageArea:
    """
    One tab's handle on the shared key/value slot.

    Reads and writes go straight to the backend. Each successful write or
    removal is published on the channel tagged with this area's context id.
    Backend errors propagate to the caller.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        channel: Optional[StorageChannel] = None,
        context_id: Optional[str] = None,
    ):
        self.backend = backend
        self.channel = channel or StorageChannel()
        self.context_id = context_id or uuid.uuid4().hex

    def get_item(self, key: str) -> Optional[str]:
        return self.backend.get_item(key)

    def set_item(self, key: str, value: str) -> None:
        old_value = self.backend.get_item(key)
        self.backend.set_item(key, value)
        self.channel.publish(StorageChange(key, old_value, value, self.context_id))

    def remove_item(self, key: str) -> None:
        old_value = self.backend.get_item(key)
        if old_value is None:
            return
        self.backend.remove_item(key)
        self.channel.publish(StorageChange(key, old_value, None, self.context_id))
