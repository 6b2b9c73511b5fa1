"""
Public analytics facade used by the site and the dashboard.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import List, Optional

from analytics.aggregation import get_recent_events, summarize
from analytics.store import EventStore
from models.analytics_data import AnalyticsData
from models.analytics_event import AnalyticsEvent
from models.summary import Summary

EXPORT_FILENAME_PREFIX = "portfolio-analytics"


class AnalyticsService:
    """
    The only surface collaborators touch.

    Constructing the service records the page view for this tab; there is
    no public call to record another one. Read-only tools pass
    track_page_view=False.
    """

    def __init__(self, store: EventStore, track_page_view: bool = True):
        self.store = store
        if track_page_view:
            self.store.record_view()

    def track_resume_download(self) -> None:
        self.store.record_download()

    def track_contact_interaction(self) -> None:
        self.store.record_contact()

    def get_analytics_data(self) -> AnalyticsData:
        """Read-only snapshot of events and totals."""
        return self.store.get_snapshot()

    def get_analytics_summary(self, now: Optional[datetime] = None) -> Summary:
        return summarize(self.store.get_snapshot(), now or self.store.clock())

    def get_recent_events(self, limit: int = 10) -> List[AnalyticsEvent]:
        return get_recent_events(self.store.get_snapshot(), limit)

    def clear_analytics_data(self) -> None:
        self.store.clear()

    def export_analytics_data(self) -> str:
        """Pretty-printed JSON of the full state, for a file download."""
        return json.dumps(self.store.get_snapshot().to_dict(), indent=2)

    def export_filename(self, now: Optional[datetime] = None) -> str:
        day = (now or self.store.clock()).strftime("%Y-%m-%d")
        return f"{EXPORT_FILENAME_PREFIX}-{day}.json"
