"""Test configuration and common fixtures."""

import json
from typing import Dict, List, Optional

import pytest

from tiktok_live_analyzer.domain.models.errors import UpstreamUnavailableError
from tiktok_live_analyzer.domain.ports.page_fetcher import PageFetcherPort, PageResponse
from tiktok_live_analyzer.domain.ports.process_runner import ProcessResult, ProcessRunnerPort
from tiktok_live_analyzer.infrastructure.cache.result_cache import TTLResultCache
from tiktok_live_analyzer.infrastructure.logs.event_log_store import InMemoryEventLogStore


def state_page(document: dict) -> str:
    """Wrap a state document in page markup the way the site embeds it."""
    return (
        "<html><head><title>TikTok</title></head><body>"
        f'<script id="SIGI_STATE" type="application/json">{json.dumps(document)}</script>'
        "</body></html>"
    )


def live_room_document(status=2, room_id="123", stream_data: Optional[dict] = None) -> dict:
    """Build a LiveRoom state document, optionally embedding stream data."""
    live_room = {"status": status, "roomId": room_id}
    if stream_data is not None:
        live_room["streamData"] = {"pull_data": {"stream_data": json.dumps(stream_data)}}
    return {"LiveRoom": {"liveRoomUserInfo": {"liveRoom": live_room}}}


class FakePageFetcher(PageFetcherPort):
    """Page fetcher returning canned pages and counting requests."""

    def __init__(self, live_page: str = "", profile_page: str = "", status_code: int = 200):
        self.live_page = live_page
        self.profile_page = profile_page
        self.status_code = status_code
        self.error: Optional[UpstreamUnavailableError] = None
        self.live_requests: List[str] = []
        self.profile_requests: List[str] = []
        self.closed = False

    async def fetch_live_page(self, account: str) -> PageResponse:
        self.live_requests.append(account)
        if self.error:
            raise self.error
        return PageResponse(url=f"live/{account}", status_code=self.status_code, text=self.live_page)

    async def fetch_profile_page(self, account: str) -> PageResponse:
        self.profile_requests.append(account)
        if self.error:
            raise self.error
        return PageResponse(url=f"profile/{account}", status_code=self.status_code, text=self.profile_page)

    async def shutdown(self) -> None:
        self.closed = True


class FakeProcessRunner(ProcessRunnerPort):
    """Process runner returning canned results, one per call.

    With ``create_outputs`` the last argument (the output path) is written,
    as ffmpeg creates its output file before it finishes or fails.
    """

    def __init__(self, results: Optional[List[ProcessResult]] = None, create_outputs: bool = True):
        self.results = list(results or [])
        self.create_outputs = create_outputs
        self.calls: List[Dict] = []
        self.spawn_error: Optional[Exception] = None

    async def run(self, args: List[str], timeout: Optional[float] = None) -> ProcessResult:
        self.calls.append({"args": list(args), "timeout": timeout})
        if self.spawn_error:
            raise self.spawn_error
        result = self.results.pop(0) if self.results else ProcessResult(return_code=0)
        if self.create_outputs:
            with open(args[-1], "wb") as f:
                f.write(b"\x00")
        return result


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def status_cache(clock: FakeClock) -> TTLResultCache:
    return TTLResultCache(ttl_seconds=60, maxsize=100, clock=clock)


@pytest.fixture
def profile_cache(clock: FakeClock) -> TTLResultCache:
    return TTLResultCache(ttl_seconds=60, maxsize=100, clock=clock)


@pytest.fixture
def event_log() -> InMemoryEventLogStore:
    return InMemoryEventLogStore()


@pytest.fixture
def page_fetcher() -> FakePageFetcher:
    return FakePageFetcher()


@pytest.fixture
def process_runner() -> FakeProcessRunner:
    return FakeProcessRunner()
