"""Domain model for live stream captures."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import FailureReason


class CaptureStage(Enum):
    """Stage of a capture pipeline."""
    PREPARING = "preparing"
    FETCHING = "fetching"
    RESOLVING = "resolving"
    SELECTING_QUALITY = "selecting_quality"
    DOWNLOADING = "downloading"
    EXTRACTING_AUDIO = "extracting_audio"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STAGES = frozenset([CaptureStage.DONE, CaptureStage.FAILED])


@dataclass
class CaptureJob:
    """A single capture of an account's broadcast to video and audio files."""

    account: str
    started_at: int  # unix millis, also part of the output file names
    planned_video_path: str
    planned_audio_path: str
    stage: CaptureStage = CaptureStage.PREPARING

    # Filled in as stages complete
    quality: Optional[str] = None
    stream_url: Optional[str] = None
    video_path: Optional[str] = None
    audio_path: Optional[str] = None

    # Failure details
    failed_stage: Optional[CaptureStage] = None
    failure_reason: Optional[FailureReason] = None
    error_message: Optional[str] = None
    upstream_status: Optional[int] = None
    exit_code: Optional[int] = None
    leftover_files: List[str] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        """Check if the job reached Done or Failed."""
        return self.stage in TERMINAL_STAGES

    @property
    def is_partial(self) -> bool:
        """Video captured but audio extraction failed."""
        return self.stage == CaptureStage.FAILED and self.video_path is not None

    def advance(self, stage: CaptureStage) -> None:
        """Move to the next non-failed stage."""
        if self.is_terminal:
            raise RuntimeError(f"Capture job already finished in stage {self.stage.value}")
        self.stage = stage

    def mark_failed(
        self,
        reason: FailureReason,
        error_message: str,
        exit_code: Optional[int] = None,
        upstream_status: Optional[int] = None,
    ) -> None:
        """Move to the absorbing Failed stage, remembering where it happened."""
        self.failed_stage = self.stage
        self.stage = CaptureStage.FAILED
        self.failure_reason = reason
        self.error_message = error_message
        self.exit_code = exit_code
        self.upstream_status = upstream_status

    def to_dict(self) -> Dict[str, Any]:
        """Convert job to dictionary for API responses."""
        return {
            'username': self.account,
            'started_at': self.started_at,
            'stage': self.stage.value,
            'quality': self.quality,
            'stream_url': self.stream_url,
            'video_path': self.video_path,
            'audio_path': self.audio_path,
            'partial': self.is_partial,
            'error': {
                'stage': self.failed_stage.value if self.failed_stage else None,
                'reason': self.failure_reason.value if self.failure_reason else None,
                'message': self.error_message,
                'exit_code': self.exit_code,
                'upstream_status': self.upstream_status,
                'leftover_files': list(self.leftover_files),
            } if self.stage == CaptureStage.FAILED else None,
        }
