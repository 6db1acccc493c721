"""Domain models for live status and profile resolution."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Room status value the platform uses for an ongoing broadcast
LIVE_STATUS_CODE = 2


@dataclass(frozen=True)
class StatusResult:
    """Resolved live status of an account."""

    account: str
    status_code: Optional[int] = None
    room_id: Optional[str] = None
    user_id: Optional[str] = None
    region: Optional[str] = None

    @property
    def is_live(self) -> bool:
        """An account is live only when the room status is the live sentinel."""
        return self.status_code is not None and self.status_code == LIVE_STATUS_CODE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the status query response shape."""
        return {
            'username': self.account,
            'live': self.is_live,
            'status': self.status_code,
            'roomId': self.room_id,
        }


@dataclass(frozen=True)
class UserInfo:
    """Profile fields recovered from the user table."""

    user_id: Optional[str] = None
    region: Optional[str] = None


@dataclass(frozen=True)
class StatusLookup:
    """A status result together with how it was obtained."""

    result: StatusResult
    cached: bool = False
