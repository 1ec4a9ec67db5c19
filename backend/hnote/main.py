"""
hnote Backend — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance,
       optionally around an already-built NoteStore.
Who:   hnote.server (the `hnote` console script), `uvicorn hnote.main:app`, tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │ Req ID   │→│  Logging        │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌────────────────┐ ┌───────────┐  │
    │  │ /note        │ │ /note/{id}     │ │ / /health │  │
    │  └──────────────┘ └────────────────┘ └───────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Decode→422 │ NotFound→404 │ Store→400 │ *→500 │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Build a NoteStore from settings unless one was injected
    2. Connect (fatal on failure: StoreError aborts startup)
    Shutdown:
    1. Close the store's connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hnote import __version__
from hnote.config import Settings, settings as default_settings
from hnote.exceptions import DecodeError, HNoteError, NotFoundError, StoreError
from hnote.middleware.logging import RequestLoggingMiddleware
from hnote.middleware.request_id import RequestIDMiddleware, request_id_var
from hnote.routes import health, notes
from hnote.store import NoteStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Access lines come from RequestLoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def build_lifespan(config: Settings):
    """Lifespan bound to `config`; used when no store was injected."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        owns_store = getattr(app.state, "store", None) is None
        if owns_store:
            app.state.store = NoteStore.from_settings(config)

        logger.info("hnote starting up...")
        # StoreError propagates: the server reports startup failure and exits
        await app.state.store.connect()
        logger.info("hnote ready")

        yield

        logger.info("hnote shutting down...")
        if owns_store:
            await app.state.store.close()
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

_HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


def _error_response(
    status_code: int,
    message: str,
    err: str,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "message": message,
            "err": err,
            "request_id": request_id_var.get(""),
        },
        headers=headers,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all; the stack trace goes to the server log only.

    Installed on RequestIDMiddleware so the body and headers carry the request ID.
    """
    logger.error(
        "[%s] Unexpected error: %s",
        request_id_var.get(""),
        str(exc),
        exc_info=exc,
    )
    return _error_response(500, "An unexpected error occurred.", "internal_error")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        RequestValidationError  → 422 (rendered as DecodeError)
        HTTPException 400       → 422 (body could not be read, rendered as DecodeError)
        HTTPException other     → same status (404 unknown route, 405 wrong method)
        DecodeError             → 422 Unprocessable Entity
        NotFoundError           → 404 Not Found
        StoreError              → 400 Bad Request
        HNoteError (base)       → 500 Internal Server Error
        Exception (fallback)    → 500 via RequestIDMiddleware(on_error=handle_unexpected_error)

    Store and driver details are logged, never returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed or mistyped JSON body."""
        errors = exc.errors()
        detail = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in errors
        )
        logger.warning("[%s] error decoding json: %s", request_id_var.get(""), detail)
        decode_error = DecodeError(context={"errors": detail})
        return _error_response(422, decode_error.message, decode_error.code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Framework-raised HTTP errors, rendered in the common error shape."""
        rid = request_id_var.get("")
        if exc.status_code == 400:
            # FastAPI's "error parsing the body" (e.g. invalid UTF-8)
            logger.warning("[%s] error decoding json: %s", rid, exc.detail)
            decode_error = DecodeError(context={"errors": str(exc.detail)})
            return _error_response(422, decode_error.message, decode_error.code)

        logger.info("[%s] HTTP %d: %s", rid, exc.status_code, exc.detail)
        return _error_response(
            exc.status_code,
            str(exc.detail),
            _HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(DecodeError)
    async def handle_decode_error(request: Request, exc: DecodeError):
        logger.warning("[%s] Decode error: %s", request_id_var.get(""), exc.context)
        return _error_response(422, exc.message, exc.code)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info("[%s] %s", request_id_var.get(""), exc.message)
        return _error_response(404, exc.message, exc.code)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error(
            "[%s] Store error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(400, exc.message, exc.code)

    @app.exception_handler(HNoteError)
    async def handle_app_error(request: Request, exc: HNoteError):
        logger.error("[%s] %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, exc.message, exc.code)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    store: Optional[NoteStore] = None,
    config: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store:  Note store to serve from. When None, the lifespan builds one
                from `config` at startup and closes it at shutdown.
        config: Settings for the lifespan-built store (defaults to the
                process-wide settings).
    """
    config = config or default_settings

    app = FastAPI(
        title="hnote API",
        description="Minimal note-taking API: create, list, update and delete text notes.",
        version=__version__,
        lifespan=build_lifespan(config),
    )
    if store is not None:
        app.state.store = store

    # Last added = first to execute: RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware, on_error=handle_unexpected_error)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(notes.router)

    return app


# `uvicorn hnote.main:app` entry point
app = create_app()
