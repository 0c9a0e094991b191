"""
Catalog Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn catalog.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────────┐ ┌──────────────┐ ┌──────────────────┐  │
    │  │  Request ID  │→│  Logging     │→│  GZip → CORS     │  │
    │  └──────────────┘ └──────────────┘ └──────────────────┘  │
    │                                                          │
    │  Routes:                                                 │
    │  ┌──────────────┐ ┌──────────────┐ ┌──────┐ ┌─────────┐  │
    │  │ /products    │ │ /files       │ │/admin│ │ /health │  │
    │  └──────────────┘ └──────────────┘ └──────┘ └─────────┘  │
    │                                                          │
    │  Exception Handlers:                                     │
    │  Validation→400 │ Forbidden→403 │ NotFound→404 │         │
    │  Conflict→409 │ FileStorage/Internal/unexpected→500      │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config warnings → storage dir → (optional) tables
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from catalog import __version__
from catalog.config import settings
from catalog.database import create_tables, dispose_engine
from catalog.exceptions import (
    ConflictError,
    FileStorageError,
    InternalError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from catalog.middleware.logging import RequestLoggingMiddleware
from catalog.middleware.request_id import RequestIDMiddleware, request_id_var
from catalog.routes import admin, files, health, products

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Catalog backend %s starting up...", __version__)

    for warning in settings.warn_about_insecure_defaults():
        logger.warning("Configuration: %s", warning)

    storage = Path(settings.storage_root)
    storage.mkdir(parents=True, exist_ok=True)
    logger.info("Storage directory: %s", storage.resolve())

    if settings.db_auto_create:
        logger.warning("DB_AUTO_CREATE is on: creating missing tables")
        await create_tables()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Catalog backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the catalog exception hierarchy to HTTP responses.

    Handler table:
        ValidationError         → 400 Bad Request
        PermissionDeniedError   → 403 Forbidden
        NotFoundError           → 404 Not Found
        ConflictError           → 409 Conflict (database detail as message)
        FileStorageError        → 500 Internal Server Error
        InternalError           → 500 Internal Server Error (generic message)
        Exception (fallback)    → 500 Internal Server Error

    5xx responses never include stack traces, SQL or file paths; those are
    logged server-side against the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(request: Request, exc: PermissionDeniedError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=403,
            content={
                "error": "forbidden",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        rid = request_id_var.get("")
        logger.info("[%s] Conflict: %s", rid, exc.message)
        return JSONResponse(
            status_code=409,
            content={
                "error": "conflict",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        rid = request_id_var.get("")
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        # The service already logged the underlying exception with its trace
        rid = request_id_var.get("")
        logger.error("[%s] Internal error | Context: %s", rid, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Product Catalog API",
        description=(
            "Product catalog backend: products with ordered image lists, "
            "lookup by id, slug or title, and JPEG image uploads."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(products.router)
    app.include_router(files.router)
    app.include_router(admin.router)
    app.include_router(health.router)

    return app


# uvicorn expects `catalog.main:app` to be importable
app = create_app()
