"""Bounded in-memory chat event log."""

import threading
from collections import deque
from typing import Deque, Dict, List

from ...domain.models.chat_event import EventLogEntry
from ...domain.ports.stores import EventLogStorePort

DEFAULT_MAX_ENTRIES = 10_000


class InMemoryEventLogStore(EventLogStorePort):
    """Per-account append-only log capped at ``max_entries``.

    The oldest entries are evicted first. Logs live for the lifetime of the
    store and are never persisted.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._logs: Dict[str, Deque[EventLogEntry]] = {}
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def append(self, account: str, entry: EventLogEntry) -> None:
        with self._lock:
            log = self._logs.get(account)
            if log is None:
                log = deque(maxlen=self._max_entries)
                self._logs[account] = log
            log.append(entry)

    def read(self, account: str) -> List[EventLogEntry]:
        with self._lock:
            log = self._logs.get(account)
            return list(log) if log is not None else []

    def accounts(self) -> List[str]:
        """Accounts that have at least one logged entry."""
        with self._lock:
            return list(self._logs.keys())
