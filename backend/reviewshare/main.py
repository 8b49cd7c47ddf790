"""
ReviewShare Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn reviewshare.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐       │
    │  │  Rate Limit  │→│ Req ID   │→│  Logging        │       │
    │  └──────────────┘ └──────────┘ └─────────────────┘       │
    │                                                          │
    │  Routes:                                                 │
    │  ┌────────┐ ┌──────────┐ ┌───────────┐ ┌────────┐ ┌────┐ │
    │  │ /users │ │ /reviews │ │ /comments │ │/drafts │ │/hc │ │
    │  └────────┘ └──────────┘ └───────────┘ └────────┘ └────┘ │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ 400 Validation │ 401 Auth │ 403 │ 404 │ 409 │ 500  │  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Build the DynamoStore; optionally provision missing tables
    4. Attach the store and the confirmation code sender to app.state

    Shutdown:
    1. Drop the store reference
    2. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from reviewshare import __version__
from reviewshare.config import settings
from reviewshare.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitExceededError,
    ReviewShareError,
    StoreError,
    ValidationError,
)
from reviewshare.middleware.logging import RequestLoggingMiddleware
from reviewshare.middleware.rate_limit import RateLimitMiddleware
from reviewshare.middleware.request_id import RequestIDMiddleware, request_id_var
from reviewshare.routes import comments, drafts, health, reviews, users
from reviewshare.services.code_sender import LoggingCodeSender
from reviewshare.store import STORE_ERRORS, DynamoStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configures the root logger once for the whole application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # boto logs every request at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Builds the DynamoStore on startup and releases it on shutdown.

    A store already placed on `app.state` (tests) is left untouched.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("ReviewShare Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    if getattr(app.state, "store", None) is None:
        app.state.store = DynamoStore(settings)
    if settings.create_tables_on_startup:
        try:
            created = await run_in_threadpool(app.state.store.create_tables)
        except STORE_ERRORS as e:
            logger.error("Could not provision DynamoDB tables: %s", str(e))
        else:
            logger.info("Provisioned tables: %s", ", ".join(created) or "none missing")

    if getattr(app.state, "code_sender", None) is None:
        app.state.code_sender = LoggingCodeSender()

    logger.info(
        "DynamoDB: region=%s endpoint=%s",
        settings.aws_region,
        settings.dynamodb_endpoint_url or "default",
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("ReviewShare Backend shutting down...")
    app.state.store = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, **extra) -> dict:
    body = {"error": error, "message": message}
    body.update(extra)
    body["request_id"] = request_id_var.get("")
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Maps the ReviewShareError hierarchy to HTTP responses.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        AuthenticationError     → 401 Unauthorized (WWW-Authenticate: Bearer)
        PermissionDeniedError   → 403 Forbidden
        NotFoundError           → 404 Not Found
        ConflictError           → 409 Conflict
        RateLimitExceededError  → 429 Too Many Requests
        StoreError              → 500 (generic message, details logged)
        ReviewShareError (base) → 500
        Exception (fallback)    → 500

    Store failures never leak botocore detail into the response body.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, details=exc.context),
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content=_error_body("unauthorized", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(request: Request, exc: PermissionDeniedError):
        logger.warning("[%s] Forbidden: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=403,
            content=_error_body("forbidden", exc.message),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=409,
            content=_error_body("conflict", exc.message),
        )

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return JSONResponse(
            status_code=429,
            content=_error_body("rate_limit_exceeded", exc.message, details=exc.context),
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error("[%s] Store error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(ReviewShareError)
    async def handle_application_error(request: Request, exc: ReviewShareError):
        logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace goes to the log only; the client gets the request id."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
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
        title="ReviewShare API",
        description=(
            "Backend for a review-sharing site: accounts with confirmation codes, "
            "reviews with likes and search, comments, drafts and saved lists, "
            "stored in DynamoDB."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(users.router)
    app.include_router(reviews.router)
    app.include_router(comments.router)
    app.include_router(drafts.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
