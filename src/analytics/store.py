"""
In-memory event store: the source of truth for one tab.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from analytics.session import SessionTagProvider
from models.analytics_data import AnalyticsData
from models.analytics_event import AnalyticsEvent, EventKind, generate_event_id
from runtime.environment import EnvironmentReader, StaticEnvironment
from storage.persistence import PersistenceAdapter


def local_now() -> datetime:
    """Current time as a timezone-aware local datetime."""
    return datetime.now().astimezone()


class EventStore:
    """
    Append-only event list with running totals.

    Every mutation persists the whole state. A failed write leaves the
    in-memory state authoritative; nothing is raised to the caller.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        sessions: SessionTagProvider,
        environment: Optional[EnvironmentReader] = None,
        clock: Callable[[], datetime] = local_now,
        data: Optional[AnalyticsData] = None,
    ):
        self.persistence = persistence
        self.sessions = sessions
        self.environment = environment or StaticEnvironment()
        self.clock = clock
        self._data = data if data is not None else AnalyticsData()

    @classmethod
    def open(
        cls,
        persistence: PersistenceAdapter,
        sessions: SessionTagProvider,
        environment: Optional[EnvironmentReader] = None,
        clock: Callable[[], datetime] = local_now,
    ) -> "EventStore":
        """Create a store seeded from persisted state, or empty."""
        data = persistence.load()
        if data is None:
            logging.info("No usable analytics data stored, starting empty")
        else:
            logging.info(f"Loaded {len(data.events)} analytics events")
        return cls(persistence, sessions, environment, clock, data)

    def record_view(self) -> AnalyticsEvent:
        return self._record(EventKind.VIEW)

    def record_download(self) -> AnalyticsEvent:
        return self._record(EventKind.DOWNLOAD)

    def record_contact(self) -> AnalyticsEvent:
        return self._record(EventKind.CONTACT)

    def _record(self, kind: EventKind) -> AnalyticsEvent:
        timestamp = self.clock()
        if timestamp.tzinfo is None:
            timestamp = timestamp.astimezone()
        event = AnalyticsEvent(
            id=generate_event_id(),
            kind=kind,
            timestamp=timestamp,
            user_agent=self.environment.user_agent(),
            referrer=self.environment.referrer(),
            session_tag=self.sessions.get_session_tag(),
        )
        self._data.append(event)
        self.persistence.save(self._data)
        logging.debug(f"Recorded {kind.value} event {event.id}")
        return event

    def get_snapshot(self) -> AnalyticsData:
        """
        Shallow copy of the current state.

        Callers must treat the result as read-only; changes to it are not
        seen by later reads.
        """
        return self._data.copy()

    def replace(self, data: AnalyticsData) -> None:
        """Swap in state written by another tab. Nothing is persisted."""
        self._data = data

    def clear(self) -> None:
        """Drop all events and the session tag, then persist the empty state."""
        self._data = AnalyticsData()
        self.persistence.save(self._data)
        self.sessions.clear()
        logging.info("Analytics data cleared")
