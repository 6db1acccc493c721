"""Domain ports for the process-wide result cache and chat event log."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from ..models.chat_event import EventLogEntry

T = TypeVar("T")


@dataclass(frozen=True)
class CacheLookup(Generic[T]):
    """A cached value and whether it is still within its time-to-live."""
    value: T
    is_fresh: bool


class ResultCachePort(ABC, Generic[T]):
    """Port for a time-bounded key to result cache."""

    @abstractmethod
    def get(self, key: str) -> Optional[CacheLookup[T]]:
        """Look up a key.

        Args:
            key: Normalized cache key

        Returns:
            The cached value with its freshness, or None if never stored
        """
        pass

    @abstractmethod
    def put(self, key: str, value: T) -> None:
        """Store a value, replacing any previous entry for the key."""
        pass

    @abstractmethod
    def lock_for(self, key: str) -> asyncio.Lock:
        """Lock serializing check-then-refresh sequences for one key."""
        pass


class EventLogStorePort(ABC):
    """Port for the bounded per-account chat event log."""

    @abstractmethod
    def append(self, account: str, entry: EventLogEntry) -> None:
        """Append an entry, evicting the oldest entries beyond the cap."""
        pass

    @abstractmethod
    def read(self, account: str) -> List[EventLogEntry]:
        """Return a snapshot of the retained entries, most recent last."""
        pass
