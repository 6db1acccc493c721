"""Domain port for real-time chat listeners."""

from abc import ABC, abstractmethod
from typing import Callable

from ..models.chat_event import EventLogEntry

# Sink receiving (account, entry) for every chat message
ChatEventSink = Callable[[str, EventLogEntry], None]


class ChatListenerPort(ABC):
    """Port for a push-protocol chat client bound to one account.

    The implementation owns the wire protocol, reconnection and event
    decoding; it only has to hand decoded chat messages to the sink.
    """

    @abstractmethod
    async def start(self) -> None:
        """Connect to the live room and start delivering chat events.

        Raises:
            UpstreamUnavailableError: If the connection cannot be established
        """
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Disconnect from the live room."""
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the listener is currently connected."""
        pass


# Builds a listener for an account that writes into the given sink
ChatListenerFactory = Callable[[str, ChatEventSink], ChatListenerPort]
