"""Health check endpoints."""

import shutil
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> Dict[str, Any]:
    """Check the health of the service components.

    Returns:
        ffmpeg availability, cache sizes and active chat listeners
    """
    config = container.config
    return {
        "status": "healthy",
        "ffmpeg_available": shutil.which(config.ffmpeg_binary) is not None,
        "cached_statuses": len(container.get('status_cache')),
        "cached_profiles": len(container.get('profile_cache')),
        "active_listeners": container.get_comment_log_service().active_listeners(),
    }
