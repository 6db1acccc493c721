"""API endpoints for chat listeners and logs."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ...domain.models.errors import LiveAnalyzerError
from ...domain.services.comment_log_service import CommentLogService
from ...infrastructure.dependencies import get_comment_log_service
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])


class ListenerResponse(BaseModel):
    message: str


class LogEntryResponse(BaseModel):
    timestamp: str
    user: Optional[str] = None
    comment: Optional[str] = None


class LogsResponse(BaseModel):
    logs: List[LogEntryResponse]


@router.get("/start", response_model=ListenerResponse)
async def start_comments(
    username: Optional[str] = Query(None, description="Account handle, with or without @"),
    comment_service: CommentLogService = Depends(get_comment_log_service),
) -> ListenerResponse:
    """Start collecting chat messages of an account in the background."""
    try:
        started = await comment_service.start_listening(username)
    except LiveAnalyzerError as e:
        raise to_http_exception(e)

    if not started:
        return ListenerResponse(message="Listener already running")
    return ListenerResponse(message="Comment listener started")


@router.post("/stop", response_model=ListenerResponse)
async def stop_comments(
    username: Optional[str] = Query(None, description="Account handle, with or without @"),
    comment_service: CommentLogService = Depends(get_comment_log_service),
) -> ListenerResponse:
    """Stop collecting chat messages; already logged messages are kept."""
    try:
        stopped = await comment_service.stop_listening(username)
    except LiveAnalyzerError as e:
        raise to_http_exception(e)

    if not stopped:
        return ListenerResponse(message="No listener running")
    return ListenerResponse(message="Comment listener stopped")


@router.get("/logs", response_model=LogsResponse)
async def get_logs(
    username: Optional[str] = Query(None, description="Account handle, with or without @"),
    limit: Optional[int] = Query(None, ge=0, description="Only the most recent messages"),
    comment_service: CommentLogService = Depends(get_comment_log_service),
) -> LogsResponse:
    """Return logged chat messages, most recent last."""
    try:
        entries = comment_service.read_logs(username, limit=limit)
    except LiveAnalyzerError as e:
        raise to_http_exception(e)

    return LogsResponse(logs=[LogEntryResponse(**entry.to_dict()) for entry in entries])
