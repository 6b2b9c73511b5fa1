from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from analytics.service import AnalyticsService
from analytics.session import SessionTagProvider
from analytics.store import EventStore, local_now
from analytics.sync import CrossTabSynchronizer
from models.config import Config, StorageConfig
from runtime.environment import EnvironmentReader, StaticEnvironment
from storage.area import StorageArea
from storage.base import KeyValueBackend, MemoryBackend
from storage.channel import StorageChannel
from storage.database import SqliteBackend
from storage.persistence import PersistenceAdapter


@dataclass
class RuntimeContext:
    """Holds one tab's analytics services; avoids global singletons."""

    config: Config
    area: StorageArea
    persistence: PersistenceAdapter
    store: EventStore
    synchronizer: CrossTabSynchronizer
    service: AnalyticsService

    @property
    def context_id(self) -> str:
        return self.area.context_id

    def close(self) -> None:
        """Stop listening for other tabs and release the storage backend."""
        self.synchronizer.stop()
        self.area.backend.close()


def create_backend(storage_cfg: StorageConfig) -> KeyValueBackend:
    """Build the configured key/value backend."""
    if storage_cfg.backend == "memory":
        return MemoryBackend(quota_bytes=storage_cfg.quota_bytes)
    backend = SqliteBackend(storage_cfg.path, quota_bytes=storage_cfg.quota_bytes)
    backend.initialize()
    return backend


def build_context(
    config: Config,
    backend: KeyValueBackend,
    channel: Optional[StorageChannel] = None,
    environment: Optional[EnvironmentReader] = None,
    context_id: Optional[str] = None,
    clock: Callable[[], datetime] = local_now,
    track_page_view: bool = True,
) -> RuntimeContext:
    """
    Wire up one tab.

    Contexts built over the same backend and channel behave like tabs of
    one origin: each sees the others' writes through its synchronizer.
    The page view for the tab is recorded here.
    """
    channel = channel or StorageChannel()
    environment = environment or StaticEnvironment(config.user_agent, config.referrer)
    area = StorageArea(backend, channel, context_id or uuid.uuid4().hex)

    persistence = PersistenceAdapter(area, config.storage.analytics_key)
    sessions = SessionTagProvider(area, config.storage.session_key)
    store = EventStore.open(persistence, sessions, environment, clock)
    synchronizer = CrossTabSynchronizer(channel, area.context_id, persistence, store)
    synchronizer.start()
    service = AnalyticsService(store, track_page_view)

    logging.info(f"Analytics context {area.context_id} ready")
    return RuntimeContext(
        config=config,
        area=area,
        persistence=persistence,
        store=store,
        synchronizer=synchronizer,
        service=service,
    )
