"""FastAPI application for the TikTok Live Analyzer service."""

import contextlib
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from ..infrastructure.dependencies import get_service_container
from .endpoints import capture, comments, health, live

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the service container on startup and release it on shutdown."""
    container = get_service_container()
    logger.info("🚀 TikTok Live Analyzer starting")

    yield  # Application runs here

    await container.shutdown()
    get_service_container.cache_clear()
    logger.info("👋 TikTok Live Analyzer stopped")


# Create FastAPI application
app = FastAPI(
    title="TikTok Live Analyzer API",
    description="Live status checks, stream capture and chat logging for TikTok accounts",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Include routers
app.include_router(health.router)
app.include_router(live.router)
app.include_router(capture.router)
app.include_router(comments.router)
