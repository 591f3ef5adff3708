"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1 import router as v1_router
from .config import get_settings

settings = get_settings()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting {settings.app_name}")
    yield
    # Shutdown
    logger.info(f"Stopping {settings.app_name}")


app = FastAPI(
    title="sport_grades",
    description="Evaluation scoring and grading session service for sport performance",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(v1_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/api-info")
async def api_info():
    """API information endpoint for clients to discover the API."""
    return {
        "name": "sport_grades",
        "description": "Evaluation scoring and grading session service for sport performance",
        "version": "0.1.0",
        "docs_url": "/docs",
        "api_prefix": settings.api_v1_prefix,
        "endpoints": {
            "evaluations": f"{settings.api_v1_prefix}/evaluations",
            "exercises": f"{settings.api_v1_prefix}/exercises",
            "students": f"{settings.api_v1_prefix}/students",
        },
        "scoring": {
            "default_max_score": str(settings.default_max_score),
            "base_point_enabled": settings.base_point_enabled,
            "evaluation_modes": ["range", "criteria"],
        },
    }
