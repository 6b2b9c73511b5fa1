"""
AnalyticsEvent model for recorded visitor interactions.
"""

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

BASE36_ALPHABET = string.digits + string.ascii_lowercase


class EventKind(str, Enum):
    """Closed set of interaction kinds."""
    VIEW = "view"
    DOWNLOAD = "download"
    CONTACT = "contact"


def random_base36(length: int) -> str:
    """Random lowercase base-36 fragment (not cryptographically strong)."""
    return "".join(random.choice(BASE36_ALPHABET) for _ in range(length))


def generate_event_id() -> str:
    """Time-based id with a random suffix, unique within a tab."""
    return f"{int(time.time() * 1000)}-{random_base36(7)}"


@dataclass(frozen=True)
class AnalyticsEvent:
    """
    One recorded occurrence of a view, download or contact interaction.

    Attributes:
        id: Unique id generated at creation.
        kind: Interaction kind.
        timestamp: Timezone-aware point in time of the occurrence.
        user_agent: Client description captured at creation.
        referrer: Page that directed the visitor here.
        session_tag: Pseudo-anonymous per-browser correlation tag.
    """
    id: str
    kind: EventKind
    timestamp: datetime
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    session_tag: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AnalyticsEvent":
        """
        Adapter: rebuild an event from its persisted form.

        Raises KeyError, ValueError or TypeError on malformed input.
        """
        timestamp = datetime.fromisoformat(d["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.astimezone()
        return cls(
            id=str(d["id"]),
            kind=EventKind(d["kind"]),
            timestamp=timestamp,
            user_agent=d.get("userAgent"),
            referrer=d.get("referrer"),
            session_tag=d.get("sessionTag"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        d: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.user_agent is not None:
            d["userAgent"] = self.user_agent
        if self.referrer is not None:
            d["referrer"] = self.referrer
        if self.session_tag is not None:
            d["sessionTag"] = self.session_tag
        return d
