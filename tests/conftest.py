"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import datetime, timedelta

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from analytics.session import SessionTagProvider
from analytics.store import EventStore
from models.analytics_data import AnalyticsData
from models.analytics_event import AnalyticsEvent, EventKind
from models.config import Config
from runtime.environment import StaticEnvironment
from storage.area import StorageArea
from storage.base import MemoryBackend
from storage.channel import StorageChannel
from storage.persistence import PersistenceAdapter

ANALYTICS_KEY = "portfolio_analytics"
SESSION_KEY = "portfolio_session"


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self.current = start.astimezone()
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


def make_event(kind, timestamp, event_id=None, **kwargs):
    """Create an AnalyticsEvent at a (naive, local) timestamp."""
    return AnalyticsEvent(
        id=event_id or f"{kind.value}-{timestamp.isoformat()}",
        kind=kind,
        timestamp=timestamp.astimezone(),
        **kwargs,
    )


def make_data(events):
    data = AnalyticsData()
    for event in events:
        data.append(event)
    return data


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def channel():
    return StorageChannel()


@pytest.fixture
def area(backend, channel):
    return StorageArea(backend, channel, context_id="tab-a")


@pytest.fixture
def persistence(area):
    return PersistenceAdapter(area, ANALYTICS_KEY)


@pytest.fixture
def sessions(area):
    return SessionTagProvider(area, SESSION_KEY)


@pytest.fixture
def environment():
    return StaticEnvironment("test-user-agent", "https://test-referrer.com")


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 15, 12, 0, 0))


@pytest.fixture
def store(persistence, sessions, environment, clock):
    return EventStore.open(persistence, sessions, environment, clock)


@pytest.fixture
def memory_config():
    """Typed config using the in-memory backend."""
    return Config.from_dict({
        "storage": {"backend": "memory"},
        "user_agent": "test-user-agent",
        "referrer": "https://test-referrer.com",
    })


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
storage:
  backend: "sqlite"
  path: "data/test.sqlite"
  analytics_key: "portfolio_analytics"
  session_key: "portfolio_session"

dashboard:
  refresh_interval_s: 30
  recent_events_limit: 20

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "storage": {
            "backend": "sqlite",
            "path": "data/test.sqlite",
            "analytics_key": "portfolio_analytics",
            "session_key": "portfolio_session",
            "quota_bytes": 5242880,
        },
        "dashboard": {
            "refresh_interval_s": 30,
            "recent_events_limit": 20,
        },
        "web": {"host": "127.0.0.1", "port": 5000},
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
