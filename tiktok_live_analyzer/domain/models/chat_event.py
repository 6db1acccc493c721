"""Domain model for logged chat events."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional


@dataclass(frozen=True)
class EventLogEntry:
    """One chat message received from a live room."""

    timestamp: str
    user: Optional[str]
    comment: Optional[str]

    @classmethod
    def now(cls, user: Optional[str], comment: Optional[str]) -> "EventLogEntry":
        """Create an entry stamped with the current UTC time."""
        timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        return cls(timestamp=timestamp, user=user, comment=comment)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            'timestamp': self.timestamp,
            'user': self.user,
            'comment': self.comment,
        }
