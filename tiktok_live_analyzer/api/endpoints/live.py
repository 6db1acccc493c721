"""API endpoints for live status and profile lookups."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ...domain.models.errors import LiveAnalyzerError
from ...domain.services.live_status_service import LiveStatusService
from ...infrastructure.dependencies import get_live_status_service
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/live", tags=["live"])


class LiveStatusResponse(BaseModel):
    """Response for a live status query."""
    username: str
    live: bool
    status: Optional[int] = None
    roomId: Optional[str] = None
    cached: bool = False


class UserInfoResponse(BaseModel):
    """Response for a profile lookup."""
    username: str
    userId: Optional[str] = None
    country: Optional[str] = None
    source: str = "SIGI_STATE"
    cached: bool = False


@router.get("/status", response_model=LiveStatusResponse)
async def check_live(
    username: Optional[str] = Query(None, description="Account handle, with or without @"),
    refresh: bool = Query(False, description="Ignore a cached result"),
    live_status_service: LiveStatusService = Depends(get_live_status_service),
) -> LiveStatusResponse:
    """Check whether an account is currently broadcasting."""
    try:
        lookup = await live_status_service.check_status(username, refresh=refresh)
    except LiveAnalyzerError as e:
        logger.error(f"❌ Live status check failed for {username!r}: {e}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"❌ Unexpected error checking {username!r}: {e}")
        raise HTTPException(status_code=500, detail={'error': str(e)})

    return LiveStatusResponse(**lookup.result.to_dict(), cached=lookup.cached)


@router.get("/info", response_model=UserInfoResponse)
async def user_info(
    username: Optional[str] = Query(None, description="Account handle, with or without @"),
    refresh: bool = Query(False, description="Ignore a cached result"),
    live_status_service: LiveStatusService = Depends(get_live_status_service),
) -> UserInfoResponse:
    """Resolve the numeric user id and region of an account."""
    try:
        lookup = await live_status_service.get_user_info(username, refresh=refresh)
    except LiveAnalyzerError as e:
        logger.error(f"❌ Profile lookup failed for {username!r}: {e}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"❌ Unexpected error looking up {username!r}: {e}")
        raise HTTPException(status_code=500, detail={'error': "Server error", 'detail': str(e)})

    result = lookup.result
    return UserInfoResponse(
        username=result.account,
        userId=result.user_id,
        country=result.region,
        cached=lookup.cached,
    )
