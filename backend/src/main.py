"""Loan Documents Backend - Main FastAPI Application

Document management for the education-loan platform: students upload KYC and
academic documents, reviewers approve or reject them.

This module creates and configures the main FastAPI application, including:
- The documents API router
- Middleware (request ID correlation, CORS)
- Exception handlers mapping document errors to HTTP responses
- Health and observability endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from database import init_db
from domain.documents.errors import (
    DocumentError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)

# Observability
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from observability.router import router as observability_router

# API v1 Routers
from api.v1.documents.router import router as documents_router

settings = get_settings()

# Configure logging
configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to process document request"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler (startup/shutdown logging)."""
    logger.info("Loan Documents API starting up...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Blob storage backend: {settings.DOCUMENT_STORAGE_BACKEND}")

    if settings.ENV == "development":
        # Production schemas come from alembic migrations
        init_db()

    yield

    logger.info("Loan Documents API shutting down...")


# Create FastAPI application
app = FastAPI(
    title="Loan Documents API",
    description="Document upload, review and retrieval for education-loan applications",
    version="0.1.0",
    docs_url="/docs" if settings.ENV != "production" else None,
    redoc_url="/redoc" if settings.ENV != "production" else None,
    openapi_url="/openapi.json" if settings.ENV != "production" else None,
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

# Request ID Middleware (must be first for proper correlation)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "Content-Disposition"],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def _error_body(code: str, message: str) -> dict:
    return {"error": code, "message": message}


@app.exception_handler(DocumentError)
async def document_exception_handler(request: Request, exc: DocumentError) -> JSONResponse:
    """Map document errors to HTTP responses.

    Validation, not-found and transition errors carry their own message.
    Storage and persistence failures answer a generic 500 with no detail.
    """
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, InvalidStatusTransitionError):
        status_code = status.HTTP_409_CONFLICT
    else:
        logger.error(
            f"Document operation failed on {request.method} {request.url.path}: {exc.code}",
            extra={"document_id": exc.document_id},
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(exc.code, GENERIC_FAILURE_MESSAGE),
        )

    return JSONResponse(status_code=status_code, content=_error_body(exc.code, exc.message))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle request shape errors as client errors (400)."""
    logger.warning(f"Validation error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors.

    Logs the full error but returns a generic message to prevent
    information leakage.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("database_error", GENERIC_FAILURE_MESSAGE),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle uncaught exceptions.

    Full details are logged but not exposed to the client.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("internal_error", GENERIC_FAILURE_MESSAGE),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, metrics, ready)
app.include_router(observability_router)

# Documents
app.include_router(documents_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "Loan Documents API",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs" if settings.ENV != "production" else None,
    }


def create_app() -> FastAPI:
    """Application factory for creating test instances."""
    return app


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENV == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
