"""
Dashboard state shared by the dashboard routes.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from analytics.service import AnalyticsService
from models.analytics_data import AnalyticsData


class DashboardState:
    """
    Dashboard-side view of the analytics data.

    Holds the last snapshot and refreshes it when the dashboard opens or
    when the caller's poll finds it older than refresh_interval_s. The
    analytics core never pushes updates here.
    """

    def __init__(
        self,
        service: AnalyticsService,
        refresh_interval_s: float = 30.0,
        clock: Callable[[], float] = time.time,
    ):
        self.service = service
        self.refresh_interval_s = refresh_interval_s
        self.clock = clock
        self.is_open = False
        self.data: AnalyticsData = service.get_analytics_data()
        self.last_refresh: float = clock()

    def refresh(self) -> AnalyticsData:
        self.data = self.service.get_analytics_data()
        self.last_refresh = self.clock()
        return self.data

    def open(self) -> None:
        self.is_open = True
        self.refresh()

    def close(self) -> None:
        self.is_open = False

    def toggle(self) -> None:
        if self.is_open:
            self.close()
        else:
            self.open()

    def needs_refresh(self, now: Optional[float] = None) -> bool:
        now = self.clock() if now is None else now
        return now - self.last_refresh >= self.refresh_interval_s

    def poll(self, now: Optional[float] = None) -> bool:
        """Refresh if the interval has elapsed. Returns True if refreshed."""
        if not self.needs_refresh(now):
            return False
        self.refresh()
        return True
