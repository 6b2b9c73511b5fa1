"""
Tests for the event store and session tag provider.
"""

from datetime import datetime

from analytics.session import SessionTagProvider
from analytics.store import EventStore
from conftest import ANALYTICS_KEY, SESSION_KEY, FakeClock
from models.analytics_event import EventKind
from models.summary import count_by_kind
from storage.area import StorageArea
from storage.base import MemoryBackend
from storage.channel import StorageChannel
from storage.errors import StorageUnavailable
from storage.persistence import PersistenceAdapter


class BrokenBackend(MemoryBackend):
    """Every operation fails, as with storage disabled."""

    def get_item(self, key):
        raise StorageUnavailable("disabled")

    def set_item(self, key, value):
        raise StorageUnavailable("disabled")

    def remove_item(self, key):
        raise StorageUnavailable("disabled")


def assert_counters_consistent(data):
    counts = count_by_kind(data.events)
    assert data.total_views == counts.views
    assert data.total_downloads == counts.downloads
    assert data.total_contacts == counts.contacts


class TestSessionTagProvider:

    def test_created_once_and_reused(self, sessions, backend):
        tag = sessions.get_session_tag()

        assert tag
        assert sessions.get_session_tag() == tag
        assert backend.get_item(SESSION_KEY) == tag

    def test_tag_is_base36(self, sessions):
        tag = sessions.get_session_tag()

        assert len(tag) == 26
        assert all(ch.isdigit() or ("a" <= ch <= "z") for ch in tag)

    def test_clear_removes_tag(self, sessions, backend):
        first = sessions.get_session_tag()
        sessions.clear()

        assert backend.get_item(SESSION_KEY) is None
        assert sessions.get_session_tag() != first

    def test_storage_failure_gives_ephemeral_tag(self, caplog):
        provider = SessionTagProvider(StorageArea(BrokenBackend(), StorageChannel(), "a"), SESSION_KEY)

        first = provider.get_session_tag()
        second = provider.get_session_tag()

        assert first and second
        assert first != second
        assert "ephemeral" in caplog.text

    def test_clear_with_broken_storage_does_not_raise(self):
        provider = SessionTagProvider(StorageArea(BrokenBackend(), StorageChannel(), "a"), SESSION_KEY)
        provider.clear()


class TestEventStoreRecording:

    def test_record_each_kind(self, store):
        store.record_view()
        store.record_download()
        store.record_contact()

        snapshot = store.get_snapshot()
        assert [e.kind for e in snapshot.events] == [EventKind.VIEW, EventKind.DOWNLOAD, EventKind.CONTACT]
        assert (snapshot.total_views, snapshot.total_downloads, snapshot.total_contacts) == (1, 1, 1)

    def test_event_captures_environment_and_session(self, store, sessions):
        event = store.record_download()

        assert event.user_agent == "test-user-agent"
        assert event.referrer == "https://test-referrer.com"
        assert event.session_tag == sessions.get_session_tag()
        assert event.timestamp == datetime(2024, 6, 15, 12, 0, 0).astimezone()
        assert event.timestamp.tzinfo is not None

    def test_environment_read_at_call_time(self, store, environment):
        first = store.record_view()
        environment.agent = "other-agent"
        second = store.record_contact()

        assert first.user_agent == "test-user-agent"
        assert second.user_agent == "other-agent"

    def test_ids_are_unique(self, store):
        ids = {store.record_view().id for _ in range(50)}

        assert len(ids) == 50

    def test_counters_match_events_after_every_call(self, store):
        for action in [store.record_view, store.record_download, store.record_download,
                       store.record_contact, store.record_view, store.record_download]:
            action()
            assert_counters_consistent(store.get_snapshot())

    def test_every_call_persists(self, store, persistence):
        store.record_download()
        store.record_contact()

        loaded = persistence.load()
        assert loaded is not None
        assert [e.kind for e in loaded.events] == [EventKind.DOWNLOAD, EventKind.CONTACT]
        assert_counters_consistent(loaded)

    def test_counters_consistent_after_reload(self, store, persistence, sessions, environment):
        for _ in range(3):
            store.record_view()
        store.record_download()

        reopened = EventStore.open(persistence, sessions, environment,
                                   FakeClock(datetime(2024, 6, 16, 8, 0, 0)))

        snapshot = reopened.get_snapshot()
        assert len(snapshot.events) == 4
        assert_counters_consistent(snapshot)
        assert snapshot.events == store.get_snapshot().events


class TestEventStoreSnapshot:

    def test_mutating_snapshot_does_not_affect_store(self, store):
        store.record_view()
        snapshot = store.get_snapshot()

        snapshot.events.clear()
        snapshot.total_views = 99

        fresh = store.get_snapshot()
        assert len(fresh.events) == 1
        assert fresh.total_views == 1


class TestEventStoreFailures:

    def test_write_failure_does_not_raise(self, environment, clock, caplog):
        area = StorageArea(BrokenBackend(), StorageChannel(), "a")
        store = EventStore.open(
            PersistenceAdapter(area, ANALYTICS_KEY),
            SessionTagProvider(area, SESSION_KEY),
            environment,
            clock,
        )

        store.record_view()
        store.record_download()

        snapshot = store.get_snapshot()
        assert snapshot.total_views == 1
        assert snapshot.total_downloads == 1
        assert "Failed to save analytics data" in caplog.text

    def test_quota_exceeded_keeps_memory_state(self, environment, clock):
        backend = MemoryBackend(quota_bytes=600)
        area = StorageArea(backend, StorageChannel(), "a")
        persistence = PersistenceAdapter(area, ANALYTICS_KEY)
        store = EventStore.open(persistence, SessionTagProvider(area, SESSION_KEY), environment, clock)

        for _ in range(10):
            store.record_view()

        assert store.get_snapshot().total_views == 10
        stored = persistence.load()
        assert stored is not None
        assert 0 < stored.total_views < 10

    def test_corrupt_storage_starts_empty(self, backend, persistence, sessions, environment, clock):
        backend.set_item(ANALYTICS_KEY, "garbage")

        store = EventStore.open(persistence, sessions, environment, clock)

        assert store.get_snapshot().events == []

    def test_overflowing_counter_starts_empty(self, backend, persistence, sessions, environment, clock):
        backend.set_item(ANALYTICS_KEY, '{"events": [], "totalViews": 1e400}')

        store = EventStore.open(persistence, sessions, environment, clock)

        assert store.get_snapshot().events == []
        assert store.get_snapshot().total_views == 0


class TestEventStoreClear:

    def test_clear_resets_and_persists(self, store, persistence, backend):
        store.record_view()
        store.record_download()

        store.clear()

        snapshot = store.get_snapshot()
        assert snapshot.events == []
        assert (snapshot.total_views, snapshot.total_downloads, snapshot.total_contacts) == (0, 0, 0)
        assert persistence.load().events == []
        assert backend.get_item(SESSION_KEY) is None

    def test_clear_twice_is_idempotent(self, store):
        store.record_contact()

        store.clear()
        first = store.get_snapshot()
        store.clear()
        second = store.get_snapshot()

        assert first == second
        assert second.events == []
