"""
PageScore Engine - FastAPI Application Entry Point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pagescore.api.v1.endpoints import cache, health, score
from pagescore.config import settings
from pagescore.dependencies import get_analysis_cache
from pagescore.logger import logger

# Create app
app = FastAPI(
    title=settings.APP_NAME,
    description="Deterministic on-page SEO scoring with an analysis cache",
    version=settings.SCORING_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(score.router, prefix="/api/v1")
app.include_router(cache.router, prefix="/api/v1/cache")


@app.on_event("startup")
async def startup():
    """Initialize on startup."""
    logger.info(f"Starting {settings.APP_NAME}...")
    cache_ready = get_analysis_cache() is not None
    logger.info(f"Analysis cache {'ready' if cache_ready else 'not in use'}")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "scoring_version": settings.SCORING_VERSION,
        "docs": "/docs"
    }
