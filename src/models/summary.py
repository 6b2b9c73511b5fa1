from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable

from models.analytics_event import AnalyticsEvent, EventKind


@dataclass(frozen=True)
class KindCounts:
    """Event counts for one bucket."""
    views: int = 0
    downloads: int = 0
    contacts: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "views": self.views,
            "downloads": self.downloads,
            "contacts": self.contacts,
        }


def count_by_kind(events: Iterable[AnalyticsEvent]) -> KindCounts:
    """Count events per kind in a single pass."""
    views = downloads = contacts = 0
    for event in events:
        if event.kind is EventKind.VIEW:
            views += 1
        elif event.kind is EventKind.DOWNLOAD:
            downloads += 1
        else:
            contacts += 1
    return KindCounts(views=views, downloads=downloads, contacts=contacts)


@dataclass(frozen=True)
class Summary:
    """Counts per time bucket."""
    total: KindCounts = field(default_factory=KindCounts)
    today: KindCounts = field(default_factory=KindCounts)
    this_week: KindCounts = field(default_factory=KindCounts)
    this_month: KindCounts = field(default_factory=KindCounts)

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            "total": self.total.to_dict(),
            "today": self.today.to_dict(),
            "thisWeek": self.this_week.to_dict(),
            "thisMonth": self.this_month.to_dict(),
        }
