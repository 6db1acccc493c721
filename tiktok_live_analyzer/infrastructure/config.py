"""Service configuration loaded from the environment."""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class AnalyzerConfig(BaseModel):
    """Configuration for page fetching, caching and captures."""

    base_url: str = Field(default="https://www.tiktok.com", description="Upstream site root")
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; TikTokAnalyzer/1.0;)",
        description="User agent sent with page requests",
    )
    accept_language: str = Field(default="en-US,en;q=0.9", description="Accept-Language header")
    request_timeout: float = Field(default=15.0, description="Page request timeout in seconds")
    state_script_id: str = Field(default="SIGI_STATE", description="Element id of the state script")

    status_cache_ttl: float = Field(default=6 * 60 * 60, description="Live status cache TTL in seconds")
    profile_cache_ttl: float = Field(default=6 * 60 * 60, description="Profile cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum cached accounts per cache")

    ffmpeg_binary: str = Field(default="ffmpeg", description="Encoding tool executable")
    process_timeout: Optional[float] = Field(
        default=None, description="Per-stage process timeout in seconds, None waits forever"
    )
    recordings_dir: str = Field(default="recordings", description="Directory for video captures")
    audio_dir: str = Field(default="audio", description="Directory for extracted audio")
    video_extension: str = Field(default="mp4")
    audio_extension: str = Field(default="wav")
    job_history_size: int = Field(default=100, description="Finished capture jobs kept for listing")

    event_log_max_entries: int = Field(default=10_000, description="Chat messages kept per account")

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        """Create configuration from environment variables."""
        defaults = cls()
        cwd = os.getcwd()

        timeout_raw = os.getenv('FFMPEG_TIMEOUT_SECONDS')
        process_timeout = float(timeout_raw) if timeout_raw else None

        config = cls(
            base_url=os.getenv('TIKTOK_BASE_URL', defaults.base_url),
            user_agent=os.getenv('TIKTOK_USER_AGENT', defaults.user_agent),
            accept_language=os.getenv('TIKTOK_ACCEPT_LANGUAGE', defaults.accept_language),
            request_timeout=float(os.getenv('TIKTOK_REQUEST_TIMEOUT', defaults.request_timeout)),
            status_cache_ttl=float(os.getenv('CACHE_STATUS_TTL_SECONDS', defaults.status_cache_ttl)),
            profile_cache_ttl=float(os.getenv('CACHE_PROFILE_TTL_SECONDS', defaults.profile_cache_ttl)),
            cache_maxsize=int(os.getenv('CACHE_MAXSIZE', defaults.cache_maxsize)),
            ffmpeg_binary=os.getenv('FFMPEG_BINARY', defaults.ffmpeg_binary),
            process_timeout=process_timeout,
            recordings_dir=os.getenv('CAPTURE_RECORDINGS_DIR', os.path.join(cwd, 'recordings')),
            audio_dir=os.getenv('CAPTURE_AUDIO_DIR', os.path.join(cwd, 'audio')),
            job_history_size=int(os.getenv('CAPTURE_JOB_HISTORY', defaults.job_history_size)),
            event_log_max_entries=int(os.getenv('EVENT_LOG_MAX_ENTRIES', defaults.event_log_max_entries)),
        )

        if config.process_timeout is None:
            logger.info("⏳ No ffmpeg timeout configured - captures run until the stream ends")
        else:
            logger.info(f"⏳ ffmpeg stages time out after {config.process_timeout}s")
        logger.info(f"📁 Captures go to {config.recordings_dir} (video) and {config.audio_dir} (audio)")

        return config
