"""Failure taxonomy shared by the status, capture and comment flows."""

from enum import Enum
from typing import Optional


class FailureReason(Enum):
    """Discriminable reason attached to every failure path."""
    INVALID_INPUT = "invalid_input"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    NO_LIVE_ROOM = "no_live_room"
    MANIFEST_UNAVAILABLE = "manifest_unavailable"
    NO_STREAM_VARIANT = "no_stream_variant"
    PROCESS_FAILURE = "process_failure"
    PROCESS_TIMEOUT = "process_timeout"
    FILESYSTEM_FAILURE = "filesystem_failure"


class LiveAnalyzerError(Exception):
    """Base error carrying a failure reason."""

    reason: FailureReason = FailureReason.UPSTREAM_UNAVAILABLE

    def __init__(self, message: str, reason: Optional[FailureReason] = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class InvalidAccountError(LiveAnalyzerError, ValueError):
    """Raised when an account name is missing or empty after normalization."""

    reason = FailureReason.INVALID_INPUT


class UpstreamUnavailableError(LiveAnalyzerError):
    """Raised when the upstream page cannot be fetched or answers non-2xx."""

    reason = FailureReason.UPSTREAM_UNAVAILABLE

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProcessSpawnError(LiveAnalyzerError):
    """Raised when an external encoding process cannot be started."""

    reason = FailureReason.PROCESS_FAILURE
