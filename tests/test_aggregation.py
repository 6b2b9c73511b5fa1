"""
Tests for time-bucketed summaries and recent-event queries.
"""

from datetime import datetime, timedelta

import pytest

from analytics.aggregation import (
    get_recent_events,
    month_start,
    summarize,
    today_start,
    week_start,
)
from conftest import make_data, make_event
from models.analytics_data import AnalyticsData
from models.analytics_event import EventKind
from models.summary import KindCounts, count_by_kind

NOW = datetime(2024, 6, 15, 12, 0, 0)


class TestBucketBoundaries:
    """Window boundaries around a fixed now of 2024-06-15T12:00:00."""

    def test_event_just_after_midnight_is_today(self):
        data = make_data([make_event(EventKind.VIEW, datetime(2024, 6, 15, 0, 0, 1))])

        assert summarize(data, NOW).today.views == 1

    def test_event_just_before_midnight_is_not_today(self):
        data = make_data([make_event(EventKind.VIEW, datetime(2024, 6, 14, 23, 59, 59))])

        summary = summarize(data, NOW)

        assert summary.today.views == 0
        assert summary.this_week.views == 1
        assert summary.this_month.views == 1

    def test_exactly_midnight_is_today(self):
        data = make_data([make_event(EventKind.DOWNLOAD, datetime(2024, 6, 15, 0, 0, 0))])

        assert summarize(data, NOW).today.downloads == 1

    def test_week_lower_bound_is_inclusive(self):
        boundary = NOW.astimezone() - timedelta(hours=7 * 24)
        data = make_data([
            make_event(EventKind.CONTACT, boundary, event_id="on"),
            make_event(EventKind.CONTACT, boundary - timedelta(microseconds=1), event_id="before"),
        ])

        assert summarize(data, NOW).this_week.contacts == 1

    def test_week_is_rolling_not_calendar_aligned(self):
        # 2024-06-10 was a Monday; an event on Sunday 06-09 13:00 is within 7x24h
        data = make_data([make_event(EventKind.VIEW, datetime(2024, 6, 9, 13, 0, 0))])

        assert summarize(data, NOW).this_week.views == 1

    def test_month_starts_on_first_day(self):
        data = make_data([
            make_event(EventKind.VIEW, datetime(2024, 6, 1, 0, 0, 0), event_id="first"),
            make_event(EventKind.VIEW, datetime(2024, 5, 31, 23, 59, 59), event_id="may"),
        ])

        summary = summarize(data, NOW)

        assert summary.this_month.views == 1
        assert summary.this_week.views == 0

    def test_boundary_helpers(self):
        assert today_start(NOW) == datetime(2024, 6, 15).astimezone()
        assert month_start(NOW) == datetime(2024, 6, 1).astimezone()
        assert week_start(NOW) == NOW.astimezone() - timedelta(days=7)

    def test_aware_and_naive_now_agree(self):
        data = make_data([make_event(EventKind.VIEW, datetime(2024, 6, 15, 0, 0, 1))])

        assert summarize(data, NOW) == summarize(data, NOW.astimezone())


class TestSummary:

    def test_empty_store_is_all_zero(self):
        summary = summarize(AnalyticsData(), NOW)

        for bucket in (summary.total, summary.today, summary.this_week, summary.this_month):
            assert bucket == KindCounts(0, 0, 0)

    def test_total_uses_running_counters(self):
        data = make_data([
            make_event(EventKind.VIEW, datetime(2023, 1, 1, 9, 0, 0), event_id="old"),
            make_event(EventKind.DOWNLOAD, datetime(2024, 6, 15, 9, 0, 0)),
        ])

        summary = summarize(data, NOW)

        assert summary.total == KindCounts(views=1, downloads=1, contacts=0)
        assert summary.total == count_by_kind(data.events)
        assert summary.today == KindCounts(views=0, downloads=1, contacts=0)

    def test_recomputed_on_each_call(self):
        data = make_data([make_event(EventKind.VIEW, datetime(2024, 6, 15, 9, 0, 0))])
        first = summarize(data, NOW)

        data.append(make_event(EventKind.CONTACT, datetime(2024, 6, 15, 10, 0, 0)))
        second = summarize(data, NOW)

        assert first.today.contacts == 0
        assert second.today.contacts == 1

    def test_to_dict_uses_camel_case_buckets(self):
        summary = summarize(AnalyticsData(), NOW).to_dict()

        assert set(summary) == {"total", "today", "thisWeek", "thisMonth"}
        assert summary["today"] == {"views": 0, "downloads": 0, "contacts": 0}


class TestRecentEvents:

    @pytest.fixture
    def abc(self):
        a = make_event(EventKind.VIEW, datetime(2024, 6, 15, 9, 0, 0), event_id="A")
        b = make_event(EventKind.DOWNLOAD, datetime(2024, 6, 15, 10, 0, 0), event_id="B")
        c = make_event(EventKind.CONTACT, datetime(2024, 6, 15, 11, 0, 0), event_id="C")
        return a, b, c

    def test_most_recent_first(self, abc):
        a, b, c = abc
        data = make_data([a, b, c])

        assert get_recent_events(data, 2) == [c, b]

    def test_sorts_by_timestamp_not_position(self, abc):
        a, b, c = abc
        data = make_data([c, a, b])

        assert get_recent_events(data, 3) == [c, b, a]

    def test_does_not_reorder_store(self, abc):
        a, b, c = abc
        data = make_data([a, b, c])

        get_recent_events(data, 3)

        assert data.events == [a, b, c]

    def test_ties_keep_insertion_order(self):
        ts = datetime(2024, 6, 15, 10, 0, 0)
        first = make_event(EventKind.VIEW, ts, event_id="first")
        second = make_event(EventKind.DOWNLOAD, ts, event_id="second")
        data = make_data([first, second])

        assert get_recent_events(data, 2) == [first, second]

    @pytest.mark.parametrize("limit", [0, -1, -100])
    def test_non_positive_limit_is_empty(self, abc, limit):
        assert get_recent_events(make_data(list(abc)), limit) == []

    def test_limit_larger_than_available(self, abc):
        assert len(get_recent_events(make_data(list(abc)), 50)) == 3
