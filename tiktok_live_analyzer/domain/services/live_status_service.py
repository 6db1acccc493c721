"""Domain service answering "is this account live?"."""

import logging

from ..models.account import account_key, normalize_account
from ..models.errors import UpstreamUnavailableError
from ..models.live_status import StatusLookup, StatusResult
from ..ports.page_fetcher import PageFetcherPort, PageResponse
from ..ports.stores import ResultCachePort
from .state_extraction import (
    DEFAULT_STATE_SCRIPT_ID,
    extract_state_blob,
    resolve_status,
    resolve_user_info,
)

logger = logging.getLogger(__name__)


class LiveStatusService:
    """Resolves live status and profile details with a TTL cache in front.

    Results carry the lower-cased account key, so every spelling of an
    account reports the same username.

    Each lookup runs under the cache's per-account lock so concurrent
    requests for the same account trigger at most one upstream fetch.
    """

    def __init__(
        self,
        page_fetcher: PageFetcherPort,
        status_cache: ResultCachePort[StatusResult],
        profile_cache: ResultCachePort[StatusResult],
        state_script_id: str = DEFAULT_STATE_SCRIPT_ID,
    ):
        """Initialize service.

        Args:
            page_fetcher: Upstream page fetcher
            status_cache: Cache for live page resolutions
            profile_cache: Cache for profile page resolutions
            state_script_id: Element id of the embedded state script
        """
        self._fetcher = page_fetcher
        self._status_cache = status_cache
        self._profile_cache = profile_cache
        self._state_script_id = state_script_id

    async def check_status(self, username: str, refresh: bool = False) -> StatusLookup:
        """Check whether an account is currently broadcasting.

        Args:
            username: Account handle, with or without a leading ``@``
            refresh: Bypass a fresh cache entry

        Returns:
            Status lookup; a page without a state document resolves to not live

        Raises:
            InvalidAccountError: If the username is empty
            UpstreamUnavailableError: If the live page cannot be fetched
        """
        account = normalize_account(username)
        key = account_key(account)

        async with self._status_cache.lock_for(key):
            cached = self._status_cache.get(key)
            if cached is not None and cached.is_fresh and not refresh:
                logger.debug(f"📦 Status cache hit for @{account}")
                return StatusLookup(result=cached.value, cached=True)

            page = await self._fetcher.fetch_live_page(account)
            self._ensure_success(page, account)

            document = extract_state_blob(page.text, self._state_script_id)
            if document is None:
                logger.info(f"🔍 No state document on live page of @{account}, treating as offline")
            resolved = resolve_status(document)
            result = StatusResult(
                account=key,
                status_code=resolved.status_code,
                room_id=resolved.room_id,
            )

            self._status_cache.put(key, result)
            logger.info(f"✅ @{account} live={result.is_live} status={result.status_code}")
            return StatusLookup(result=result, cached=False)

    async def get_user_info(self, username: str, refresh: bool = False) -> StatusLookup:
        """Resolve the numeric user id and region from the profile page.

        Args:
            username: Account handle, with or without a leading ``@``
            refresh: Bypass a fresh cache entry

        Returns:
            Status lookup whose result carries ``user_id`` and ``region``

        Raises:
            InvalidAccountError: If the username is empty
            UpstreamUnavailableError: If the profile page cannot be fetched
        """
        account = normalize_account(username)
        key = account_key(account)

        async with self._profile_cache.lock_for(key):
            cached = self._profile_cache.get(key)
            if cached is not None and cached.is_fresh and not refresh:
                logger.debug(f"📦 Profile cache hit for @{account}")
                return StatusLookup(result=cached.value, cached=True)

            page = await self._fetcher.fetch_profile_page(account)
            self._ensure_success(page, account)

            document = extract_state_blob(page.text, self._state_script_id)
            user_info = resolve_user_info(document, account)
            resolved = resolve_status(document)
            result = StatusResult(
                account=key,
                status_code=resolved.status_code,
                room_id=resolved.room_id,
                user_id=user_info.user_id,
                region=user_info.region,
            )

            self._profile_cache.put(key, result)
            logger.info(f"✅ Profile of @{account} resolved: user_id={result.user_id} region={result.region}")
            return StatusLookup(result=result, cached=False)

    @staticmethod
    def _ensure_success(page: PageResponse, account: str) -> None:
        if not page.is_success:
            raise UpstreamUnavailableError(
                f"TikTok HTTP {page.status_code} for @{account}",
                status_code=page.status_code,
            )
