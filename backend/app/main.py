"""
FastAPI Application Entry Point.

This is the main application file for the Parcel Service Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from backend.app.core.config import settings
from backend.app.core.logging_config import setup_logging
from backend.app.core.observability import ObservabilityMiddleware
from backend.app.api.router import router as api_router
from backend.app.db.session import init_db, dispose_engine
from backend.app.services.payment_gateway import payment_gateway
from backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from backend.app.models.user import User
from backend.app.models.rider import Rider
from backend.app.models.parcel import Parcel
from backend.app.models.tracking_event import TrackingEvent
from backend.app.models.payment import Payment

setup_logging(settings.log_level)
logger = logging.getLogger("parcel_service")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Closes the gateway client and database pool on shutdown.
    """
    await init_db()
    logger.info("Database ready")
    yield
    await payment_gateway.aclose()
    await dispose_engine()
    logger.info("Shutdown complete")


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Parcel delivery backend: parcels, riders, payments and tracking",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to the Parcel Service API!",
        "docs": "/docs",
        "health": "/health",
    }


app.include_router(api_router)
