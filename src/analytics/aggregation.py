"""
Time-bucketed summaries over the event list.

Nothing is cached: each call walks the current events, so results always
match the list they were computed from.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

from models.analytics_data import AnalyticsData
from models.analytics_event import AnalyticsEvent
from models.summary import KindCounts, Summary, count_by_kind

WEEK_WINDOW = timedelta(days=7)


def _as_local(dt: datetime) -> datetime:
    """Naive datetimes are taken as local time."""
    return dt.astimezone()


def today_start(now: datetime) -> datetime:
    """Local midnight of now's calendar day."""
    local = _as_local(now)
    return datetime(local.year, local.month, local.day).astimezone()


def week_start(now: datetime) -> datetime:
    """Start of the rolling 7x24h window ending at now."""
    return _as_local(now) - WEEK_WINDOW


def month_start(now: datetime) -> datetime:
    """Local midnight of the first day of now's month."""
    local = _as_local(now)
    return datetime(local.year, local.month, 1).astimezone()


def count_since(data: AnalyticsData, start: datetime) -> KindCounts:
    """Count events with timestamp >= start."""
    return count_by_kind(e for e in data.events if e.timestamp >= start)


def summarize(data: AnalyticsData, now: datetime) -> Summary:
    """
    Build the total/today/this-week/this-month buckets.

    Args:
        data: Current analytics state.
        now: Reference time; naive values are interpreted as local time.

    Returns:
        Summary whose total comes from the running counters and whose
        windowed buckets are recounted from the events.
    """
    return Summary(
        total=KindCounts(
            views=data.total_views,
            downloads=data.total_downloads,
            contacts=data.total_contacts,
        ),
        today=count_since(data, today_start(now)),
        this_week=count_since(data, week_start(now)),
        this_month=count_since(data, month_start(now)),
    )


def get_recent_events(data: AnalyticsData, limit: int) -> List[AnalyticsEvent]:
    """
    Most recent events first, at most limit of them.

    Equal timestamps keep insertion order. The store's list is not reordered.
    """
    if limit <= 0:
        return []
    ordered = sorted(data.events, key=lambda e: e.timestamp, reverse=True)
    return ordered[:limit]
