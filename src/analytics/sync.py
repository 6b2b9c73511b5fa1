from __future__ import annotations

import logging
from typing import Callable, Optional

from analytics.store import EventStore
from models.analytics_data import AnalyticsData
from storage.channel import StorageChange, StorageChannel
from storage.persistence import PersistenceAdapter


class CrossTabSynchronizer:
    """
    Reloads a tab's store when another tab rewrites the analytics key.

    The other tab's write replaces local state wholesale. Two tabs saving
    at the same moment still race; the last save wins.
    """

    def __init__(
        self,
        channel: StorageChannel,
        context_id: str,
        persistence: PersistenceAdapter,
        store: EventStore,
    ):
        self.channel = channel
        self.context_id = context_id
        self.persistence = persistence
        self.store = store
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def running(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.channel.subscribe(self.context_id, self.handle_change)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_change(self, change: StorageChange) -> bool:
        """
        React to a storage change.

        Returns:
            True if the store was reloaded.
        """
        if change.key != self.persistence.key or change.source == self.context_id:
            return False

        data = self.persistence.load()
        self.store.replace(data if data is not None else AnalyticsData())
        logging.debug(
            f"Reloaded analytics from context {change.source}: "
            f"{len(data.events) if data else 0} events"
        )
        return True
