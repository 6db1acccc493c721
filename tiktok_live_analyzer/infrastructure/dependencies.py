"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.models.live_status import StatusResult
from ..domain.ports.chat_listener import ChatEventSink, ChatListenerPort
from ..domain.services.capture_service import CaptureService
from ..domain.services.comment_log_service import CommentLogService
from ..domain.services.live_status_service import LiveStatusService
from .cache.result_cache import TTLResultCache
from .chat.tiktok_live_listener import TikTokLiveChatListener
from .config import AnalyzerConfig
from .http.tiktok_page_fetcher import TikTokPageFetcher
from .logs.event_log_store import InMemoryEventLogStore
from .process.ffmpeg_runner import FFmpegProcessRunner

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


def tiktok_listener_factory(account: str, sink: ChatEventSink) -> ChatListenerPort:
    """Build a TikTokLive backed chat listener."""
    return TikTokLiveChatListener(account, sink)


class ServiceContainer:
    """Owns the process-wide stores and the services built on them."""

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        """Initialize service container.

        Args:
            config: Service configuration, read from the environment when omitted
        """
        self.config = config or AnalyzerConfig.from_env()
        self._services: Dict[str, Any] = {}
        self._setup_services()

    def _setup_services(self):
        """Setup all services and their dependencies."""
        logger.info("🔧 Setting up service container...")
        config = self.config

        # Process-wide stores
        status_cache: TTLResultCache[StatusResult] = TTLResultCache(
            ttl_seconds=config.status_cache_ttl,
            maxsize=config.cache_maxsize,
        )
        profile_cache: TTLResultCache[StatusResult] = TTLResultCache(
            ttl_seconds=config.profile_cache_ttl,
            maxsize=config.cache_maxsize,
        )
        event_log = InMemoryEventLogStore(max_entries=config.event_log_max_entries)

        # Infrastructure adapters
        page_fetcher = TikTokPageFetcher(config)
        process_runner = FFmpegProcessRunner(binary=config.ffmpeg_binary)

        # Domain services
        live_status_service = LiveStatusService(
            page_fetcher,
            status_cache=status_cache,
            profile_cache=profile_cache,
            state_script_id=config.state_script_id,
        )
        capture_service = CaptureService(
            page_fetcher,
            process_runner,
            recordings_dir=config.recordings_dir,
            audio_dir=config.audio_dir,
            video_extension=config.video_extension,
            audio_extension=config.audio_extension,
            process_timeout=config.process_timeout,
            state_script_id=config.state_script_id,
            job_history_size=config.job_history_size,
        )
        comment_log_service = CommentLogService(event_log, tiktok_listener_factory)

        self._services = {
            'status_cache': status_cache,
            'profile_cache': profile_cache,
            'event_log': event_log,
            'page_fetcher': page_fetcher,
            'live_status_service': live_status_service,
            'capture_service': capture_service,
            'comment_log_service': comment_log_service,
        }

        logger.info("✅ Service container setup completed")

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_live_status_service(self) -> LiveStatusService:
        return self.get('live_status_service')

    def get_capture_service(self) -> CaptureService:
        return self.get('capture_service')

    def get_comment_log_service(self) -> CommentLogService:
        return self.get('comment_log_service')

    async def shutdown(self) -> None:
        """Stop chat listeners and close the HTTP client."""
        logger.info("🛑 Shutting down service container...")
        await self.get_comment_log_service().shutdown()
        await self.get('page_fetcher').shutdown()


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance."""
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
def get_live_status_service() -> LiveStatusService:
    """FastAPI dependency for live status service."""
    return get_service_container().get_live_status_service()


def get_capture_service() -> CaptureService:
    """FastAPI dependency for capture service."""
    return get_service_container().get_capture_service()


def get_comment_log_service() -> CommentLogService:
    """FastAPI dependency for comment log service."""
    return get_service_container().get_comment_log_service()
