"""Tests for the live status service."""

import asyncio

import pytest

from conftest import live_room_document, state_page
from tiktok_live_analyzer.domain.models.errors import InvalidAccountError, UpstreamUnavailableError
from tiktok_live_analyzer.domain.services.live_status_service import LiveStatusService


@pytest.fixture
def service(page_fetcher, status_cache, profile_cache) -> LiveStatusService:
    return LiveStatusService(page_fetcher, status_cache=status_cache, profile_cache=profile_cache)


@pytest.mark.asyncio
async def test_live_account(service, page_fetcher):
    """Test a live room document resolves to live with its room id."""
    page_fetcher.live_page = state_page(live_room_document(status=2, room_id="123"))

    lookup = await service.check_status("alice")

    assert lookup.result.to_dict() == {
        "username": "alice",
        "live": True,
        "status": 2,
        "roomId": "123",
    }
    assert not lookup.cached


@pytest.mark.asyncio
async def test_missing_state_document_is_offline(service, page_fetcher):
    """Test a page without a state document is reported offline, not as an error."""
    page_fetcher.live_page = "<html><body>Just a page</body></html>"

    lookup = await service.check_status("alice")

    assert lookup.result.to_dict() == {
        "username": "alice",
        "live": False,
        "status": None,
        "roomId": None,
    }


@pytest.mark.asyncio
async def test_malformed_state_document_is_offline(service, page_fetcher):
    page_fetcher.live_page = '<script id="SIGI_STATE">{oops</script>'
    lookup = await service.check_status("alice")
    assert not lookup.result.is_live
    assert lookup.result.status_code is None


@pytest.mark.asyncio
async def test_cache_hit_within_ttl(service, page_fetcher, clock):
    """Test the second lookup for a normalized-equal account is served from cache."""
    page_fetcher.live_page = state_page(live_room_document(status=4))

    first = await service.check_status("@Alice ")
    clock.advance(30)
    second = await service.check_status("alice")

    assert page_fetcher.live_requests == ["Alice"]
    assert second.cached
    assert second.result == first.result
    assert second.result.account == "alice"


@pytest.mark.asyncio
async def test_username_is_canonical_across_spellings(service, page_fetcher):
    """Test cached, uncached and refreshed lookups report one username."""
    page_fetcher.live_page = state_page(live_room_document(status=2))

    first = await service.check_status("FOO")
    cached = await service.check_status("@Foo ")
    refreshed = await service.check_status("foo", refresh=True)

    assert cached.cached
    assert not refreshed.cached
    usernames = {lookup.result.to_dict()["username"] for lookup in (first, cached, refreshed)}
    assert usernames == {"foo"}


@pytest.mark.asyncio
async def test_user_info_username_is_canonical(service, page_fetcher):
    page_fetcher.profile_page = state_page({"UserModule": {"users": {"foo": {"id": "1", "uniqueId": "foo"}}}})

    first = await service.get_user_info("FOO")
    again = await service.get_user_info("foo", refresh=True)

    assert first.result.account == again.result.account == "foo"


@pytest.mark.asyncio
async def test_stale_entry_refetches(service, page_fetcher, clock):
    page_fetcher.live_page = state_page(live_room_document(status=4))
    await service.check_status("alice")

    clock.advance(61)
    page_fetcher.live_page = state_page(live_room_document(status=2))
    lookup = await service.check_status("alice")

    assert len(page_fetcher.live_requests) == 2
    assert lookup.result.is_live
    assert not lookup.cached


@pytest.mark.asyncio
async def test_refresh_bypasses_cache(service, page_fetcher):
    page_fetcher.live_page = state_page(live_room_document(status=4))
    await service.check_status("alice")
    await service.check_status("alice", refresh=True)
    assert len(page_fetcher.live_requests) == 2


@pytest.mark.asyncio
async def test_concurrent_lookups_fetch_once(service, page_fetcher):
    """Test concurrent lookups for one account share a single upstream fetch."""
    page_fetcher.live_page = state_page(live_room_document(status=2))

    results = await asyncio.gather(*(service.check_status("alice") for _ in range(5)))

    assert page_fetcher.live_requests == ["alice"]
    assert sum(1 for r in results if not r.cached) == 1


@pytest.mark.asyncio
async def test_non_success_status_raises(service, page_fetcher):
    page_fetcher.status_code = 403
    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await service.check_status("alice")
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_transport_error_propagates(service, page_fetcher):
    page_fetcher.error = UpstreamUnavailableError("Upstream fetch failed: boom")
    with pytest.raises(UpstreamUnavailableError):
        await service.check_status("alice")


@pytest.mark.asyncio
async def test_failed_fetch_is_not_cached(service, page_fetcher, status_cache):
    page_fetcher.status_code = 500
    with pytest.raises(UpstreamUnavailableError):
        await service.check_status("alice")
    assert status_cache.get("alice") is None


@pytest.mark.asyncio
async def test_empty_username(service, page_fetcher):
    with pytest.raises(InvalidAccountError):
        await service.check_status(" @ ")
    assert page_fetcher.live_requests == []


@pytest.mark.asyncio
async def test_user_info_from_profile_page(service, page_fetcher):
    """Test user id and region come from the profile page."""
    page_fetcher.profile_page = state_page(
        {"UserModule": {"users": {"alice": {"id": "6900", "region": "FR", "uniqueId": "alice"}}}}
    )

    lookup = await service.get_user_info("@alice")

    assert page_fetcher.profile_requests == ["alice"]
    assert lookup.result.user_id == "6900"
    assert lookup.result.region == "FR"

    again = await service.get_user_info("ALICE")
    assert again.cached
    assert page_fetcher.profile_requests == ["alice"]


@pytest.mark.asyncio
async def test_user_info_without_document(service, page_fetcher):
    page_fetcher.profile_page = "<html></html>"
    lookup = await service.get_user_info("alice")
    assert lookup.result.user_id is None
    assert lookup.result.region is None
