from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

from models.analytics_event import AnalyticsEvent
from models.summary import KindCounts, Summary

if TYPE_CHECKING:
    from .state import DashboardState


class KindCountsResponse(BaseModel):
    views: int = 0
    downloads: int = 0
    contacts: int = 0

    @classmethod
    def from_counts(cls, counts: KindCounts) -> "KindCountsResponse":
        return cls(views=counts.views, downloads=counts.downloads, contacts=counts.contacts)


class SummaryResponse(BaseModel):
    total: KindCountsResponse
    today: KindCountsResponse
    thisWeek: KindCountsResponse = Field(..., description="Rolling 7x24h window")
    thisMonth: KindCountsResponse

    @classmethod
    def from_summary(cls, summary: Summary) -> "SummaryResponse":
        return cls(
            total=KindCountsResponse.from_counts(summary.total),
            today=KindCountsResponse.from_counts(summary.today),
            thisWeek=KindCountsResponse.from_counts(summary.this_week),
            thisMonth=KindCountsResponse.from_counts(summary.this_month),
        )


class EventResponse(BaseModel):
    id: str
    kind: str = Field(..., description="view|download|contact")
    timestamp: datetime
    userAgent: Optional[str] = None
    referrer: Optional[str] = None
    sessionTag: Optional[str] = None

    @classmethod
    def from_event(cls, event: AnalyticsEvent) -> "EventResponse":
        return cls(
            id=event.id,
            kind=event.kind.value,
            timestamp=event.timestamp,
            userAgent=event.user_agent,
            referrer=event.referrer,
            sessionTag=event.session_tag,
        )


class TrackResponse(BaseModel):
    """Returned by the tracking endpoints."""
    tracked: str
    total: KindCountsResponse


class DashboardResponse(BaseModel):
    """Dashboard panel state and the snapshot it is showing."""
    isOpen: bool
    refreshIntervalS: float
    lastRefresh: float = Field(..., description="Epoch seconds of the last snapshot")
    eventCount: int
    total: KindCountsResponse

    @classmethod
    def from_state(cls, state: "DashboardState") -> "DashboardResponse":
        data = state.data
        return cls(
            isOpen=state.is_open,
            refreshIntervalS=state.refresh_interval_s,
            lastRefresh=state.last_refresh,
            eventCount=len(data.events),
            total=KindCountsResponse(
                views=data.total_views,
                downloads=data.total_downloads,
                contacts=data.total_contacts,
            ),
        )
