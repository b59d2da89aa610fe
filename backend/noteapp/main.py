"""
NoteApp Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers; the
       module-level `app` is what uvicorn serves (uvicorn noteapp.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:      /api/notes/...        /health         │
    │                                                     │
    │  Exception Handlers:                                │
    │    NotFoundError → 404 │ InternalError → 500        │
    │    Exception (fallback) → 500                       │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, prepare the SQLite directory, create tables
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from noteapp import __version__
from noteapp.config import settings
from noteapp.database import dispose_engine, ensure_sqlite_directory, init_models
from noteapp.exceptions import NoteAppError
from noteapp.middleware.logging import RequestLoggingMiddleware
from noteapp.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from noteapp.routes import health, notes

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("noteapp.access")


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure application-wide logging once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output goes to stdout so container runtimes collect it.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if not settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("NoteApp Backend %s starting up...", __version__)

    ensure_sqlite_directory(settings.database_url)
    await init_models()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("NoteApp Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(request: Request, status: int, error: str, message: str) -> dict:
    """Error payload shared by every handler: {timestamp, status, error, message, path}."""
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "error": error,
        "message": message,
        "path": request.url.path,
    }


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP responses.

        NotFoundError  → 404 "Note Not Found"
        InternalError  → 500 "Internal Server Error" (message returned, cause logged)
        Exception      → 500 with a generic message (stack trace logged only)

    Request validation errors keep FastAPI's default 422 response.
    """

    @app.exception_handler(NoteAppError)
    async def handle_app_error(request: Request, exc: NoteAppError):
        rid = getattr(request.state, "request_id", "")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid,
                exc.error,
                exc.message,
                exc.context,
                exc_info=exc.__cause__ is not None,
            )
        else:
            logger.warning("[%s] %s: %s", rid, exc.error, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, exc.status_code, exc.error, exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs in ServerErrorMiddleware, outside RequestIDMiddleware and the access log
        rid = getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        access_logger.error(
            "%s %s %d [%s]", request.method, request.url.path, 500, rid,
        )
        headers = {REQUEST_ID_HEADER: rid} if rid else None
        return JSONResponse(
            status_code=500,
            content=error_body(
                request,
                500,
                "Internal Server Error",
                "An unexpected error occurred. Please try again later.",
            ),
            headers=headers,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="NoteApp API",
        description=(
            "Create, read, update, delete and like notes, with subject search, "
            "word statistics and a most-liked ranking."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → GZip → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured address."""
    import uvicorn

    uvicorn.run(
        "noteapp.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
