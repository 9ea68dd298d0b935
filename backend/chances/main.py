"""
Chances Calculator - FastAPI Application

Main entry point for the backend API.
Estimates a student's admission chances at every school in the catalog.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chances.config.settings import settings
from chances.infrastructure.exceptions import (
    ChancesError,
    ValidationError,
    UpstreamTimeoutError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info(f"Chances Calculator starting in {settings.environment} mode...")

    if settings.database_url:
        try:
            from chances.infrastructure.db.database import init_db
            await init_db()
            logger.info("Database connection pool initialized")
        except Exception as e:
            logger.warning(f"Database initialization skipped: {e}")
    else:
        logger.warning("DATABASE_URL is not set; /api/chances will fail")

    yield

    # Shutdown
    if settings.database_url:
        try:
            from chances.infrastructure.db.database import close_db
            await close_db()
            logger.info("Database connection pool closed")
        except Exception as e:
            logger.warning(f"Database shutdown error: {e}")

    logger.info("Chances Calculator shutting down...")


app = FastAPI(
    title="Chances Calculator",
    description="Admission chances and Safety/Target/Reach tiers for every school",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS configuration from Settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Exception Handlers
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=400,
        content=exc.to_dict(),
    )


@app.exception_handler(UpstreamTimeoutError)
async def upstream_timeout_handler(request: Request, exc: UpstreamTimeoutError):
    """Handle slow data loads."""
    return JSONResponse(
        status_code=504,
        content=exc.to_dict(),
    )


@app.exception_handler(ChancesError)
async def general_error_handler(request: Request, exc: ChancesError):
    """Handle all other application errors."""
    return JSONResponse(
        status_code=500,
        content=exc.to_dict(),
    )


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "chances-calculator"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Chances Calculator API",
        "version": "1.0.0",
        "docs": "/docs",
    }


# ============================================================================
# Import and register routers
# ============================================================================

from chances.api.routes import chances  # noqa: E402

app.include_router(chances.router, prefix="/api", tags=["Chances"])
