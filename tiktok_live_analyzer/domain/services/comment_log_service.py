"""Domain service for chat listeners and their logs."""

import asyncio
import logging
from typing import Dict, List, Optional, Set

from ..models.account import account_key, normalize_account
from ..models.chat_event import EventLogEntry
from ..ports.chat_listener import ChatListenerFactory, ChatListenerPort
from ..ports.stores import EventLogStorePort

logger = logging.getLogger(__name__)


class CommentLogService:
    """Starts one chat listener per account and serves the logged messages.

    Listeners write into the event log store; reading never touches the
    chat connection.
    """

    def __init__(self, event_log: EventLogStorePort, listener_factory: ChatListenerFactory):
        """Initialize service.

        Args:
            event_log: Bounded per-account event log
            listener_factory: Builds a listener for an account and sink
        """
        self._event_log = event_log
        self._listener_factory = listener_factory
        self._listeners: Dict[str, ChatListenerPort] = {}
        # Accounts whose listener is still connecting
        self._starting: Set[str] = set()
        self._lock = asyncio.Lock()

    def record(self, account: str, entry: EventLogEntry) -> None:
        """Sink handed to listeners."""
        self._event_log.append(account_key(account), entry)

    async def start_listening(self, username: str) -> bool:
        """Start a chat listener for an account.

        Args:
            username: Account handle, with or without a leading ``@``

        Returns:
            True if a listener was started, False if a connected or connecting
            listener already exists for the account

        Raises:
            InvalidAccountError: If the username is empty
            UpstreamUnavailableError: If the listener cannot connect
        """
        account = normalize_account(username)
        key = account_key(account)

        async with self._lock:
            if key in self._starting:
                logger.info(f"💬 Listener already starting for @{account}")
                return False

            existing = self._listeners.get(key)
            if existing is not None:
                if existing.is_connected:
                    logger.info(f"💬 Listener already running for @{account}")
                    return False
                logger.info(f"🔄 Replacing disconnected listener for @{account}")
                del self._listeners[key]

            self._starting.add(key)

        # Connect outside the lock so other accounts are not held up
        try:
            listener = self._listener_factory(account, self.record)
            await listener.start()
            self._listeners[key] = listener
        finally:
            self._starting.discard(key)

        logger.info(f"✅ Comment listener started for @{account}")
        return True

    async def stop_listening(self, username: str) -> bool:
        """Stop the chat listener of an account, keeping its log.

        Returns:
            True if a listener was stopped, False if none was running
        """
        key = account_key(username)
        async with self._lock:
            listener = self._listeners.pop(key, None)
        if listener is None:
            return False
        await listener.stop()
        return True

    def read_logs(self, username: str, limit: Optional[int] = None) -> List[EventLogEntry]:
        """Return logged messages, most recent last.

        Args:
            username: Account handle, with or without a leading ``@``
            limit: Keep only the most recent ``limit`` entries

        Raises:
            InvalidAccountError: If the username is empty
        """
        entries = self._event_log.read(account_key(username))
        if limit is not None and limit >= 0:
            entries = entries[-limit:] if limit else []
        return entries

    def active_listeners(self) -> List[str]:
        """Accounts whose listener is still connected."""
        return [key for key, listener in self._listeners.items() if listener.is_connected]

    async def shutdown(self) -> None:
        """Stop every listener."""
        async with self._lock:
            listeners = list(self._listeners.items())
            self._listeners.clear()
        for key, listener in listeners:
            try:
                await listener.stop()
            except Exception as e:
                logger.warning(f"⚠️ Failed to stop listener for @{key}: {e}")
