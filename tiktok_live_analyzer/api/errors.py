"""Mapping of domain failures to HTTP status codes."""

from fastapi import HTTPException

from ..domain.models.errors import FailureReason, LiveAnalyzerError, UpstreamUnavailableError

HTTP_STATUS_BY_REASON = {
    FailureReason.INVALID_INPUT: 400,
    FailureReason.NO_LIVE_ROOM: 404,
    FailureReason.NO_STREAM_VARIANT: 404,
    FailureReason.UPSTREAM_UNAVAILABLE: 502,
    FailureReason.MANIFEST_UNAVAILABLE: 502,
    FailureReason.PROCESS_FAILURE: 500,
    FailureReason.PROCESS_TIMEOUT: 504,
    FailureReason.FILESYSTEM_FAILURE: 500,
}


def http_status_for(reason: FailureReason) -> int:
    return HTTP_STATUS_BY_REASON.get(reason, 500)


def to_http_exception(error: LiveAnalyzerError) -> HTTPException:
    """Convert a domain error into an HTTPException with a structured detail."""
    detail = {'error': str(error), 'reason': error.reason.value}
    if isinstance(error, UpstreamUnavailableError) and error.status_code is not None:
        detail['upstream_status'] = error.status_code
    return HTTPException(status_code=http_status_for(error.reason), detail=detail)
