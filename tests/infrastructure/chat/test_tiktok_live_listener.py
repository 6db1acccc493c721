"""Tests for the TikTokLive chat listener adapter."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from TikTokLive.events import CommentEvent

from tiktok_live_analyzer.domain.models.errors import UpstreamUnavailableError
from tiktok_live_analyzer.infrastructure.chat.tiktok_live_listener import TikTokLiveChatListener


@pytest.fixture
def client():
    """Mock TikTokLive client."""
    client = MagicMock()
    client.start = AsyncMock()
    client.disconnect = AsyncMock()
    client.connected = False
    return client


@pytest.fixture
def received():
    return []


@pytest.fixture
def listener(client, received):
    return TikTokLiveChatListener("alice", lambda account, entry: received.append((account, entry)), client=client)


def test_registers_comment_handler(listener, client):
    registered = [call.args[0] for call in client.add_listener.call_args_list]
    assert CommentEvent in registered


@pytest.mark.asyncio
async def test_comment_is_forwarded(listener, received):
    event = SimpleNamespace(user=SimpleNamespace(unique_id="bob", nickname="Bob"), comment="hello")

    await listener._on_comment(event)

    account, entry = received[0]
    assert account == "alice"
    assert entry.user == "bob"
    assert entry.comment == "hello"


@pytest.mark.asyncio
async def test_comment_falls_back_to_nickname(listener, received):
    event = SimpleNamespace(user=SimpleNamespace(unique_id="", nickname="Bob"), comment="hey")
    await listener._on_comment(event)
    assert received[0][1].user == "Bob"


@pytest.mark.asyncio
async def test_start_failure(listener, client):
    client.start.side_effect = RuntimeError("user offline")
    with pytest.raises(UpstreamUnavailableError):
        await listener.start()


@pytest.mark.asyncio
async def test_start_and_stop(listener, client):
    await listener.start()
    client.start.assert_awaited_once()

    client.connected = True
    assert listener.is_connected
    await listener.stop()
    client.disconnect.assert_awaited_once()
