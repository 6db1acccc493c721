"""Domain port for fetching upstream account pages."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class PageResponse:
    """Raw upstream page."""
    url: str
    status_code: int
    text: str

    @property
    def is_success(self) -> bool:
        """Check if the upstream answered with a 2xx status."""
        return 200 <= self.status_code < 300


class PageFetcherPort(ABC):
    """Port for retrieving an account's public pages."""

    @abstractmethod
    async def fetch_live_page(self, account: str) -> PageResponse:
        """Fetch the live page of an account.

        Args:
            account: Normalized account name

        Returns:
            Page response, whatever its status code

        Raises:
            UpstreamUnavailableError: If the request could not be completed
        """
        pass

    @abstractmethod
    async def fetch_profile_page(self, account: str) -> PageResponse:
        """Fetch the profile page of an account.

        Args:
            account: Normalized account name

        Returns:
            Page response, whatever its status code

        Raises:
            UpstreamUnavailableError: If the request could not be completed
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Release network resources."""
        pass
