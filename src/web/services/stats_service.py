from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from analytics.service import AnalyticsService
from ..api_models import EventResponse, KindCountsResponse, SummaryResponse


@dataclass
class StatsService:
    service: AnalyticsService
    default_limit: int = 20

    def get_summary(self, now: Optional[datetime] = None) -> SummaryResponse:
        return SummaryResponse.from_summary(self.service.get_analytics_summary(now))

    def get_totals(self) -> KindCountsResponse:
        return KindCountsResponse.from_counts(self.service.get_analytics_summary().total)

    def get_recent(self, limit: Optional[int] = None) -> List[EventResponse]:
        limit = self.default_limit if limit is None else max(0, limit)
        return [EventResponse.from_event(e) for e in self.service.get_recent_events(limit)]
