"""
Hermie - FastAPI Application

Screenshot capture into subjects with spaced-repetition review.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (parent of hermie/)
# Must happen before importing modules that use environment variables
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from hermie import __version__  # noqa: E402
from hermie.api.dependencies import cleanup_dependencies, init_dependencies  # noqa: E402
from hermie.api.routes import (  # noqa: E402
    capture_router,
    captures_router,
    events_router,
    review_router,
    subjects_router,
)
from hermie.config import (  # noqa: E402
    CORS_ALLOWED_HEADERS,
    CORS_ALLOWED_METHODS,
    get_cors_allow_credentials,
    get_cors_origins,
    is_production,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan manager for startup/shutdown events.

    Startup:
    - Open the store and build the capture session

    Shutdown:
    - Cancel a pending capture
    - Close the store
    """
    logger.info("Starting Hermie backend...")

    await init_dependencies()
    logger.info("Dependencies initialized")

    yield

    logger.info("Shutting down Hermie backend...")
    await cleanup_dependencies()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Hermie API",
    description="Screenshot capture with spaced-repetition review",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if is_production() else "/docs",
    redoc_url=None if is_production() else "/redoc",
)

# CORS configuration - loaded from environment
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=get_cors_allow_credentials(),
    allow_methods=CORS_ALLOWED_METHODS,
    allow_headers=CORS_ALLOWED_HEADERS,
)

# Register API routers
app.include_router(capture_router)
app.include_router(review_router)
app.include_router(subjects_router)
app.include_router(captures_router)
app.include_router(events_router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "hermie-backend",
        "version": __version__,
    }
