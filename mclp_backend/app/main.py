"""
FastAPI Application Entry Point.

This is the main application file for the MCLP Backend.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from mclp_backend.app.core.config import settings
from mclp_backend.app.core.observability import ObservabilityMiddleware, setup_logging
from mclp_backend.app.api.v1.router import router as api_router
from mclp_backend.app.db.session import engine, Base
from mclp_backend.app.services.blob_storage import get_blob_storage
from mclp_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from mclp_backend.app.models.ledger_entry import LedgerEntry
from mclp_backend.app.models.land_file import LandFile
from mclp_backend.app.models.document import DocumentRecord

setup_logging(settings.log_level, settings.log_json)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Makes sure the upload directory exists.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    get_blob_storage().ensure_dir()
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    description="Land files, accounts ledger and document management API",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get(settings.api_prefix, tags=["Root"])
async def root():
    """
    API banner.

    Returns:
        dict: Welcome message and the available resource endpoints
    """
    return {
        "message": "MCLP API is running",
        "endpoints": [
            f"{settings.api_prefix}/files",
            f"{settings.api_prefix}/accounts",
            f"{settings.api_prefix}/documents",
            f"{settings.api_prefix}/health",
        ],
    }


@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "OK",
        "app_name": settings.app_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


app.include_router(api_router, prefix=settings.api_prefix)
