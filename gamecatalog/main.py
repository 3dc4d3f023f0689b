"""Game Catalog Service - FastAPI Application."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gamecatalog.api import games_router, sync_router
from gamecatalog.config import get_settings
from gamecatalog.database import init_db
from gamecatalog.scheduler import start_scheduler, stop_scheduler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Game Catalog Service")
    await init_db()
    if settings.scheduler_enabled:
        start_scheduler()

    yield

    # Shutdown
    logger.info("Shutting down Game Catalog Service")
    if settings.scheduler_enabled:
        stop_scheduler()


# Create application
app = FastAPI(
    title="Game Catalog Service",
    description="Game catalog with IGDB and SteamSpy metadata synchronization",
    version="0.1.0",
    lifespan=lifespan,
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check (no auth required)
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "game-catalog",
    }


# Root info
@app.get("/")
async def root():
    """API information."""
    return {
        "service": "Game Catalog Service",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


# Include routers
app.include_router(games_router, prefix="/api/v1")
app.include_router(sync_router, prefix="/api/v1")


# Error handlers
@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "gamecatalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
