"""
Cookbook Services — FastAPI Application Factories
===================================================

What:  Builds the metadata and recipe service applications and runs them.
How:   ``create_app()`` assembles middleware, exception handlers and one
       router per ResourceDefinition; ``create_metadata_app()`` and
       ``create_recipe_app()`` pick the resources.

Application Layout:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain (outer → inner):                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌────────┐ │
    │  │  Req ID  │→│ Logging  │→│ Recovery │→│  CORS  │ │
    │  └──────────┘ └──────────┘ └──────────┘ └────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  /api/v2/<resource>  (administrator role required)  │
    │  /health             (open)                         │
    └─────────────────────────────────────────────────────┘

Running:
    cookbook-metadata-service        (console script)
    cookbook-recipe-service          (console script)
    uvicorn cookbook.main:recipe_app --port 8080

Both listen on port 8080 with a 15 s keep-alive timeout. On SIGINT/SIGTERM
uvicorn stops accepting connections and drains in-flight requests for up to
300 s; the lifespan hook then disposes the database engine. SIGHUP reloads
the configuration (logging only, see reload_settings()).
"""

import logging
import signal
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cookbook import __version__
from cookbook.auth import OidcAuthenticator
from cookbook.config import Settings, get_settings, reload_settings
from cookbook.database import dispose_engine
from cookbook.exceptions import AuthenticationError, CookbookError
from cookbook.handlers.resource_handlers import describe_validation_error
from cookbook.logger import setup_logging
from cookbook.middleware.logging import RequestLoggingMiddleware
from cookbook.middleware.recovery import RecoveryMiddleware
from cookbook.middleware.request_id import RequestIDMiddleware, request_id_var
from cookbook.resources import (
    CATEGORIES,
    CUISINE_TYPES,
    DIFFICULTY_LEVELS,
    PREPARATION_TIMES,
    RECIPES,
    TAGS,
    ResourceDefinition,
)
from cookbook.routes import health
from cookbook.routes.resources import build_resource_router

logger = logging.getLogger(__name__)

SERVER_HOST = "0.0.0.0"
SERVER_PORT = 8080
READ_TIMEOUT_SECONDS = 15
SHUTDOWN_TIMEOUT_SECONDS = 300


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.global_settings.log_level)
    logger.info("%s %s starting up", app.title, __version__)
    logger.info("Log level: %s", settings.global_settings.log_level)
    if settings.oauth.disable_security_check:
        logger.warning("Security checks are DISABLED; tokens are not verified")
    else:
        logger.info("Verifying tokens issued by %s", settings.oauth.issuer)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("%s shutting down", app.title)
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Render errors raised outside the handlers in the ``{"error": ...}`` shape.

    Handler hierarchy:
        AuthenticationError     → 401 (+ WWW-Authenticate: Bearer)
        AuthorizationError      → 403
        other CookbookError     → its status_code
        HTTPException           → its status (unknown route 404, 405, ...)
        RequestValidationError  → 400

    Anything else is left to RecoveryMiddleware.
    """

    @app.exception_handler(CookbookError)
    async def handle_cookbook_error(request: Request, exc: CookbookError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        else:
            logger.debug("[%s] %s rejected: %s", rid, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": describe_validation_error(exc)})


# ══════════════════════════════════════════════════════════════════════════
# Application Factories
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    title: str,
    description: str,
    definitions: Iterable[ResourceDefinition],
    settings: Optional[Settings] = None,
    authenticator: Optional[OidcAuthenticator] = None,
) -> FastAPI:
    """
    Assemble one service.

    Args:
        title:          Service name (also reported by /health).
        description:    OpenAPI description.
        definitions:    Resources to mount under /api/v2.
        settings:       Defaults to the process-wide settings.
        authenticator:  Defaults to an OidcAuthenticator for settings.oauth.
    """
    settings = settings or get_settings()
    authenticator = authenticator or OidcAuthenticator(settings.oauth)

    app = FastAPI(
        title=title,
        description=description,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.authenticator = authenticator

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → Recovery → CORS
    cors = settings.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.allowed_origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allowed_methods,
        allow_headers=cors.allowed_headers,
        expose_headers=cors.expose_headers,
        max_age=cors.max_age,
    )
    app.add_middleware(RecoveryMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for definition in definitions:
        app.include_router(build_resource_router(definition, authenticator))
    app.include_router(health.router)

    return app


def create_metadata_app(
    settings: Optional[Settings] = None,
    authenticator: Optional[OidcAuthenticator] = None,
) -> FastAPI:
    return create_app(
        title="Cookbook Metadata Service",
        description=(
            "Tags, categories, cuisine types, difficulty levels and preparation "
            "times used to organise recipes."
        ),
        definitions=(TAGS, CATEGORIES, CUISINE_TYPES, DIFFICULTY_LEVELS, PREPARATION_TIMES),
        settings=settings,
        authenticator=authenticator,
    )


def create_recipe_app(
    settings: Optional[Settings] = None,
    authenticator: Optional[OidcAuthenticator] = None,
) -> FastAPI:
    return create_app(
        title="Cookbook Recipe Service",
        description="Create, read, update and soft-delete recipes.",
        definitions=(RECIPES,),
        settings=settings,
        authenticator=authenticator,
    )


# ══════════════════════════════════════════════════════════════════════════
# Entry Points
# ══════════════════════════════════════════════════════════════════════════

def install_reload_handler(app: FastAPI) -> None:
    """
    Re-read configuration on SIGHUP.

    Only logging and ``app.state.settings`` pick up the new values; the
    database engine and CORS middleware keep their startup configuration.
    A config file that fails to load leaves the running settings in place.
    """
    if not hasattr(signal, "SIGHUP"):
        return

    def on_sighup(signum, frame) -> None:
        try:
            app.state.settings = reload_settings()
        except ValueError as e:
            logger.error("Configuration reload failed, keeping current settings: %s", e)

    signal.signal(signal.SIGHUP, on_sighup)


def serve(app: FastAPI) -> None:
    """Run ``app`` until SIGINT/SIGTERM, then drain and return."""
    setup_logging(app.state.settings.global_settings.log_level)
    install_reload_handler(app)
    uvicorn.run(
        app,
        host=SERVER_HOST,
        port=SERVER_PORT,
        timeout_keep_alive=READ_TIMEOUT_SECONDS,
        timeout_graceful_shutdown=SHUTDOWN_TIMEOUT_SECONDS,
        log_config=None,
    )


def serve_metadata() -> None:
    serve(create_metadata_app())


def serve_recipes() -> None:
    serve(create_recipe_app())


# ── Application Instances ────────────────────────────────────────────────
# Importable targets for `uvicorn cookbook.main:<name>`
metadata_app = create_metadata_app()
recipe_app = create_recipe_app()
