"""Chat listener adapter built on the TikTokLive client library."""

import logging
from typing import Optional

from TikTokLive import TikTokLiveClient
from TikTokLive.events import CommentEvent, DisconnectEvent

from ...domain.models.chat_event import EventLogEntry
from ...domain.models.errors import UpstreamUnavailableError
from ...domain.ports.chat_listener import ChatEventSink, ChatListenerPort

logger = logging.getLogger(__name__)


class TikTokLiveChatListener(ChatListenerPort):
    """Forwards chat comments of one live room into an event sink.

    The TikTokLive client owns the webcast push protocol, reconnection and
    event decoding.
    """

    def __init__(
        self,
        account: str,
        sink: ChatEventSink,
        client: Optional[TikTokLiveClient] = None,
    ):
        """Initialize the listener.

        Args:
            account: Normalized account whose live room is watched
            sink: Receives every decoded chat message
            client: Pre-built client, created from the account when omitted
        """
        self._account = account
        self._sink = sink
        self._client = client or TikTokLiveClient(unique_id=f"@{account}")
        self._client.add_listener(CommentEvent, self._on_comment)
        self._client.add_listener(DisconnectEvent, self._on_disconnect)

    @property
    def account(self) -> str:
        return self._account

    @property
    def is_connected(self) -> bool:
        return bool(self._client.connected)

    async def start(self) -> None:
        logger.info(f"💬 Connecting chat listener for @{self._account}")
        try:
            await self._client.start()
        except Exception as e:
            logger.error(f"❌ Chat listener for @{self._account} failed to connect: {e}")
            raise UpstreamUnavailableError(f"Failed to connect: {e}")
        logger.info(f"✅ Chat listener connected for @{self._account}")

    async def stop(self) -> None:
        if self._client.connected:
            await self._client.disconnect()
        logger.info(f"🛑 Chat listener stopped for @{self._account}")

    async def _on_comment(self, event: CommentEvent) -> None:
        user = getattr(event, "user", None)
        name = None
        if user is not None:
            name = getattr(user, "unique_id", None) or getattr(user, "nickname", None)
        self._sink(self._account, EventLogEntry.now(user=name, comment=event.comment))

    async def _on_disconnect(self, event: DisconnectEvent) -> None:
        logger.warning(f"⚠️ Chat listener for @{self._account} disconnected")
