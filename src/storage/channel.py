"""
Storage-change notifications between execution contexts (tabs).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

StorageListener = Callable[["StorageChange"], None]


@dataclass(frozen=True)
class StorageChange:
    """
    A write to the shared slot.

    Attributes:
        key: Key that changed.
        old_value: Previous value (None if absent).
        new_value: New value (None if removed).
        source: Context id of the writer.
    """
    key: str
    old_value: Optional[str]
    new_value: Optional[str]
    source: str


class StorageChannel:
    """
    Delivers each change to the listeners of every context except the
    one that made it.
    """

    def __init__(self):
        self._listeners: List[Tuple[str, StorageListener]] = []

    def subscribe(self, context_id: str, listener: StorageListener) -> Callable[[], None]:
        """
        Register a listener for changes made by other contexts.

        Returns:
            Callable that removes the registration.
        """
        entry = (context_id, listener)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def publish(self, change: StorageChange) -> int:
        """
        Notify other contexts of a change.

        Returns:
            Number of listeners notified.
        """
        delivered = 0
        for context_id, listener in list(self._listeners):
            if context_id == change.source:
                continue
            try:
                listener(change)
                delivered += 1
            except Exception as e:
                logging.warning(
                    f"Storage listener in context {context_id} failed for '{change.key}': {e}"
                )
        return delivered
