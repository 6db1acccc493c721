"""API endpoints for capturing live broadcasts."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ...domain.models.capture_job import CaptureStage
from ...domain.models.errors import LiveAnalyzerError
from ...domain.services.capture_service import CaptureService
from ...infrastructure.dependencies import get_capture_service
from ..errors import http_status_for, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/capture", tags=["capture"])


@router.post("")
async def record(
    username: Optional[str] = Query(None, description="Account handle, with or without @"),
    capture_service: CaptureService = Depends(get_capture_service),
) -> JSONResponse:
    """Download the live stream of an account and extract its audio.

    Blocks until both ffmpeg stages finish. A failed job is returned with
    the stage and reason that ended it.
    """
    try:
        job = await capture_service.capture(username)
    except LiveAnalyzerError as e:
        raise to_http_exception(e)

    body = job.to_dict()
    if job.stage == CaptureStage.DONE:
        body['message'] = "Recording complete"
        return JSONResponse(status_code=200, content=body)

    return JSONResponse(status_code=http_status_for(job.failure_reason), content=body)


@router.get("/jobs")
async def list_jobs(
    capture_service: CaptureService = Depends(get_capture_service),
) -> Dict[str, List[Dict[str, Any]]]:
    """List captures started since the service came up, oldest first."""
    return {'jobs': [job.to_dict() for job in capture_service.recent_jobs()]}
