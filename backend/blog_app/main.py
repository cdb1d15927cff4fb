"""
Blog Backend: FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   `create_app(database)` wires middleware, exception handlers and routes
       around one `Database` handle; the lifespan handler disposes that handle
       at shutdown.
Who:   uvicorn (`uvicorn blog_app.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:      GET/POST /posts   GET /posts/{id}     │
    │               GET /health                           │
    │                                                     │
    │  Exception Handlers:                                │
    │    BlogAppError → status from ErrorKind             │
    │    RequestValidationError → 400                     │
    │    Exception → 500                                  │
    │                                                     │
    │  app.state.database: Database (engine + sessions)   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log the database backend in use
    Shutdown: dispose the database engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import make_url

from blog_app import __version__
from blog_app.config import settings
from blog_app.database import Database
from blog_app.exceptions import ERROR_RESPONSES, BlogAppError, ErrorKind
from blog_app.middleware.logging import RequestLoggingMiddleware
from blog_app.middleware.request_id import RequestIDMiddleware, request_id_var
from blog_app.routes import health, posts

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """The database handle lives exactly as long as the application."""
    setup_logging()
    database: Database = app.state.database
    logger.info("Blog backend %s starting up", __version__)
    logger.info("Database: %s", make_url(database.url).render_as_string(hide_password=True))

    yield

    logger.info("Blog backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application errors to HTTP responses.

        BlogAppError            → ERROR_RESPONSES[exc.kind]
        RequestValidationError  → 400 validation_error (malformed body or field type)
        Exception (fallback)    → 500, generic message, traceback logged

    SYSTEM_FAILURE responses never carry the exception's message or context;
    those are logged server-side only.
    """

    @app.exception_handler(BlogAppError)
    async def handle_blog_app_error(request: Request, exc: BlogAppError):
        spec = ERROR_RESPONSES[exc.kind]
        rid = request_id_var.get("")

        if exc.kind is ErrorKind.SYSTEM_FAILURE:
            logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
            return JSONResponse(
                status_code=spec.status_code,
                content=error_body(spec.error_code, GENERIC_SERVER_ERROR),
            )

        if exc.kind in (ErrorKind.VALIDATION, ErrorKind.CONFLICT):
            logger.warning("[%s] %s: %s", rid, exc.kind.value, exc.message)
            return JSONResponse(
                status_code=spec.status_code,
                content=error_body(spec.error_code, exc.message, exc.context),
            )

        return JSONResponse(
            status_code=spec.status_code,
            content=error_body(spec.error_code, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), fields)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", "malformed request body", {"fields": fields}),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=error_body("internal_server_error", GENERIC_SERVER_ERROR),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Persistence handle to serve requests with. Built from
                  settings when omitted. The app owns it from here on and
                  disposes it at shutdown.
    """
    app = FastAPI(
        title="Blog API",
        description="Posts and authors over a relational database.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database or Database.from_settings(settings)

    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
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

    register_exception_handlers(app)

    app.include_router(posts.router)
    app.include_router(health.router)

    return app


app = create_app()
