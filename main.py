import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError

from worknexus import __version__
from worknexus.core.config import settings
from worknexus.core.database import init_db
from worknexus.core.logging_config import setup_logging
from worknexus.api.endpoints import (
    activity,
    admin,
    applications,
    auth,
    availability,
    bookmarks,
    checkins,
    dashboard,
    emergency_contacts,
    health,
    jobs,
    messages,
    notifications,
    payments,
    profiles,
    realtime,
    role_requests,
    skills,
    tools,
)

# Configure logging
setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up WorkNexus API...")
    logger.info("Initializing database...")
    init_db()
    logger.info("Database initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down WorkNexus API...")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=__version__,
    description="Gig marketplace connecting student workers with event organizers",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong. Please try again."})


# Include routers
for module in (
    auth,
    profiles,
    dashboard,
    jobs,
    applications,
    bookmarks,
    messages,
    notifications,
    realtime,
    checkins,
    emergency_contacts,
    role_requests,
    admin,
    availability,
    skills,
    payments,
    activity,
    tools,
):
    app.include_router(module.router, prefix=settings.API_V1_STR)

app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": "WorkNexus API",
        "version": __version__,
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
