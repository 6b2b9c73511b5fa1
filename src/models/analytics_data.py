"""
AnalyticsData: the event list plus running totals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from models.analytics_event import AnalyticsEvent, EventKind


@dataclass
class AnalyticsData:
    """
    Aggregate root for recorded analytics.

    Each total must equal the number of events of the matching kind.
    """
    events: List[AnalyticsEvent] = field(default_factory=list)
    total_views: int = 0
    total_downloads: int = 0
    total_contacts: int = 0

    def append(self, event: AnalyticsEvent) -> None:
        """Append an event and bump the matching counter."""
        self.events.append(event)
        if event.kind is EventKind.VIEW:
            self.total_views += 1
        elif event.kind is EventKind.DOWNLOAD:
            self.total_downloads += 1
        else:
            self.total_contacts += 1

    def copy(self) -> "AnalyticsData":
        """Shallow copy: new list, same immutable events."""
        return AnalyticsData(
            events=list(self.events),
            total_views=self.total_views,
            total_downloads=self.total_downloads,
            total_contacts=self.total_contacts,
        )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AnalyticsData":
        """
        Adapter: rebuild from the persisted blob.

        Any malformed event fails the whole conversion.
        """
        raw_events = d["events"]
        if not isinstance(raw_events, list):
            raise TypeError("events must be a list")
        return cls(
            events=[AnalyticsEvent.from_dict(e) for e in raw_events],
            total_views=int(d.get("totalViews", 0)),
            total_downloads=int(d.get("totalDownloads", 0)),
            total_contacts=int(d.get("totalContacts", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted/exported layout."""
        return {
            "events": [e.to_dict() for e in self.events],
            "totalDownloads": self.total_downloads,
            "totalViews": self.total_views,
            "totalContacts": self.total_contacts,
        }
