"""
FastAPI application entry point.

Configures the API with all routes, middleware, and error handling.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventgraph.errors import (
    EventGraphError,
    NotFoundError,
    AlreadyExistsError,
    InvalidRatingError,
    InvalidOperationError,
)

from .v1.router import router as v1_router
from .deps import get_services, close_services

logger = logging.getLogger(__name__)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

# Domain error -> HTTP status
ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AlreadyExistsError: status.HTTP_409_CONFLICT,
    InvalidRatingError: 422,
    InvalidOperationError: status.HTTP_400_BAD_REQUEST,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("Starting Event Graph API...")

    # Restore the graph on startup
    get_services()
    logger.info("Services initialized")

    yield

    logger.info("Shutting down...")
    close_services()


app = FastAPI(
    title="Event Graph API",
    description="API for managing users, events and categories and recommending events",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EventGraphError)
async def event_graph_exception_handler(request: Request, exc: EventGraphError):
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        logger.error(f"Unhandled graph error: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc)}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# Health check
@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "event-graph-api"}


# Include API v1 routes
app.include_router(v1_router, prefix="/api/v1")


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    """API root endpoint."""
    return {
        "name": "Event Graph API",
        "version": "1.0.0",
        "docs": "/docs"
    }


def run():
    """Serve the API with uvicorn."""
    import uvicorn

    from eventgraph.config import load_config

    config = load_config()
    logger.info(f"Starting Event Graph API on {config.api.host}:{config.api.port}...")
    uvicorn.run(app, host=config.api.host, port=config.api.port)


if __name__ == "__main__":
    run()
