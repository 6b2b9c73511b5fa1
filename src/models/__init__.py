"""
Typed models for the portfolio analytics engine.

Use the from_dict/to_dict adapters to convert to and from the persisted
and configured dictionary forms.
"""

from .analytics_event import AnalyticsEvent, EventKind, generate_event_id
from .analytics_data import AnalyticsData
from .summary import KindCounts, Summary, count_by_kind
from .config import (
    Config,
    DashboardConfig,
    StorageConfig,
    WebConfig,
)

__all__ = [
    # Events
    "AnalyticsEvent",
    "EventKind",
    "generate_event_id",
    # Store
    "AnalyticsData",
    # Aggregation
    "KindCounts",
    "Summary",
    "count_by_kind",
    # Config
    "Config",
    "DashboardConfig",
    "StorageConfig",
    "WebConfig",
]
