"""TikTok page fetcher adapter implementing PageFetcherPort."""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from ...domain.models.errors import UpstreamUnavailableError
from ...domain.ports.page_fetcher import PageFetcherPort, PageResponse
from ..config import AnalyzerConfig

logger = logging.getLogger(__name__)


class TikTokPageFetcher(PageFetcherPort):
    """Fetches public account pages with fixed browser-like headers."""

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the fetcher.

        Args:
            config: Service configuration
            client: Pre-built HTTP client, created lazily when omitted
        """
        self._config = config or AnalyzerConfig()
        self._client = client

    @property
    def headers(self) -> dict:
        return {
            'User-Agent': self._config.user_agent,
            'Accept-Language': self._config.accept_language,
        }

    def live_page_url(self, account: str) -> str:
        return f"{self._config.base_url}/@{quote(account, safe='')}/live"

    def profile_page_url(self, account: str) -> str:
        return f"{self._config.base_url}/@{quote(account, safe='')}"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=self.headers,
                timeout=self._config.request_timeout,
                follow_redirects=True,
            )
        return self._client

    async def _fetch(self, url: str) -> PageResponse:
        logger.debug(f"🌐 Fetching {url}")
        try:
            response = await self._get_client().get(url, headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(f"❌ Upstream request failed for {url}: {e}")
            raise UpstreamUnavailableError(f"Upstream fetch failed: {e}")

        if not response.is_success:
            logger.warning(f"⚠️ Upstream answered HTTP {response.status_code} for {url}")
        return PageResponse(url=url, status_code=response.status_code, text=response.text)

    async def fetch_live_page(self, account: str) -> PageResponse:
        return await self._fetch(self.live_page_url(account))

    async def fetch_profile_page(self, account: str) -> PageResponse:
        return await self._fetch(self.profile_page_url(account))

    async def shutdown(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
