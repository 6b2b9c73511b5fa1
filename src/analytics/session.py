"""
Pseudo-anonymous per-browser session tag.
"""

from __future__ import annotations

import logging

from models.analytics_event import random_base36
from storage.area import StorageArea
from storage.errors import StorageError


def generate_session_tag() -> str:
    """Two random base-36 fragments; collision-resistant, not secret."""
    return random_base36(13) + random_base36(13)


class SessionTagProvider:
    """
    Returns the tag stored under session_key, creating it on first use.

    Storage failures degrade to a fresh tag for that call only.
    """

    def __init__(self, area: StorageArea, session_key: str):
        self.area = area
        self.session_key = session_key

    def get_session_tag(self) -> str:
        try:
            tag = self.area.get_item(self.session_key)
            if tag:
                return tag
            tag = generate_session_tag()
            self.area.set_item(self.session_key, tag)
            return tag
        except StorageError as e:
            logging.warning(f"Session tag storage unavailable, using ephemeral tag: {e}")
            return generate_session_tag()

    def clear(self) -> None:
        try:
            self.area.remove_item(self.session_key)
        except StorageError as e:
            logging.warning(f"Failed to clear session tag: {e}")
