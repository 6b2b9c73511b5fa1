"""
Persistence adapter: AnalyticsData <-> one JSON blob in the shared slot.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from models.analytics_data import AnalyticsData
from models.summary import count_by_kind
from storage.area import StorageArea
from storage.errors import StorageError


class PersistenceAdapter:
    """
    Loads and saves the whole analytics state under a single key.

    Neither operation raises: load() returns None when nothing usable is
    stored, save() returns False when the write did not happen.
    """

    def __init__(self, area: StorageArea, key: str):
        self.area = area
        self.key = key

    def load(self) -> Optional[AnalyticsData]:
        """
        Read and rebuild the stored state.

        Timestamps come back as datetime values. A blob that fails to parse,
        or holds any malformed event, is discarded as a whole.

        Returns:
            The stored state, or None if absent or unusable.
        """
        try:
            stored = self.area.get_item(self.key)
        except StorageError as e:
            logging.warning(f"Failed to load analytics data: {e}")
            return None

        if stored is None:
            return None

        try:
            data = AnalyticsData.from_dict(json.loads(stored))
        except Exception as e:
            logging.warning(f"Failed to load analytics data: {e}")
            return None

        counts = count_by_kind(data.events)
        if (data.total_views, data.total_downloads, data.total_contacts) != (
            counts.views, counts.downloads, counts.contacts
        ):
            logging.warning(
                f"Stored totals ({data.total_views}/{data.total_downloads}/{data.total_contacts}) "
                f"disagree with {len(data.events)} stored events; recounting"
            )
            data.total_views = counts.views
            data.total_downloads = counts.downloads
            data.total_contacts = counts.contacts

        return data

    def save(self, data: AnalyticsData) -> bool:
        """
        Overwrite the stored blob with the full state.

        Returns:
            True if the write succeeded.
        """
        try:
            self.area.set_item(self.key, json.dumps(data.to_dict()))
            return True
        except (StorageError, TypeError, ValueError) as e:
            logging.warning(f"Failed to save analytics data: {e}")
            return False
