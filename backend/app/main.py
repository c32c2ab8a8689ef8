"""
FastAPI application entry point for the Careers Page Builder.

This is the main app that:
- Initializes FastAPI with CORS
- Registers all API routers
- Provides health check endpoint
- Sets up database connection lifecycle
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import engine
# Import API routers
from app.api import auth, companies, jobs, careers

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    On startup: Database connection is already handled by engine
    On shutdown: Close database connections gracefully
    """
    # Startup
    logger.info("Starting Careers Page Builder API...")
    logger.info(f"Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else 'configured'}")
    logger.info(f"Debug mode: {settings.debug}")

    yield

    # Shutdown
    logger.info("Shutting down Careers Page Builder API...")
    await engine.dispose()


# Initialize FastAPI app
app = FastAPI(
    title="Careers Page Builder API",
    description="API for building, publishing and filling company careers pages",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
# Set ALLOWED_ORIGINS environment variable with comma-separated domains
allowed_origins = [
    "http://localhost:5173",  # Local dashboard dev server
]

if settings.allowed_origins:
    allowed_origins.extend(
        origin.strip() for origin in settings.allowed_origins.split(',') if origin.strip()
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {
        "status": "healthy",
        "service": "Careers Page Builder API",
        "version": "1.0.0",
    }


# Root endpoint
@app.get("/")
async def root():
    """API root with basic info."""
    return {
        "message": "Careers Page Builder API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


# Register API routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(companies.router, prefix="/api/companies", tags=["companies"])
app.include_router(jobs.router, prefix="/api", tags=["jobs"])
app.include_router(careers.router, prefix="/api/careers", tags=["careers"])
