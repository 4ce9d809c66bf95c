"""
FastAPI application entry point for the jobforms API.

This is the main app that:
- Initializes FastAPI with CORS
- Registers the forms, jobs, applications and prescreen routers
- Provides health check endpoint
- Disposes the database engine on shutdown
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobforms.config import settings
from jobforms import database
# Import API routers
from jobforms.api import forms, jobs, applications, prescreen

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown logging and engine disposal."""
    logger.info("Starting jobforms API...")
    logger.info(f"Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else 'configured'}")
    logger.info(f"Debug mode: {settings.debug}")

    yield

    logger.info("Shutting down jobforms API...")
    await database.engine.dispose()


app = FastAPI(
    title="jobforms API",
    description="Application form builder and prescreen questions for job postings",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
# Set ALLOWED_ORIGINS environment variable with comma-separated domains
allowed_origins = [
    "http://localhost:3000",  # Local development
]

if settings.allowed_origins:
    allowed_origins.extend(o.strip() for o in settings.allowed_origins.split(',') if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {
        "status": "healthy",
        "service": "jobforms API",
        "version": "1.0.0",
    }


@app.get("/")
async def root():
    """API root with basic info."""
    return {
        "message": "jobforms API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


# Register API routers
app.include_router(forms.router, prefix="/api/application-forms", tags=["forms"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(applications.router, prefix="/api", tags=["applications"])
app.include_router(prescreen.router, prefix="/api", tags=["prescreen"])
