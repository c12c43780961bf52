"""
SmartHome API: FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(dependencies=None) returns a configured FastAPI instance.
       When dependencies are given (tests, embedding), they are used as-is.
       Otherwise the lifespan handler connects to MongoDB, compiles the JSON
       schemas and builds them.
Who:   uvicorn (uvicorn smarthome.main:app) or python -m smarthome.

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the Motor client and ping the server (failure is logged, the
       health endpoint reports it)
    3. Load and compile validation schemas (failure aborts startup)

    Shutdown:
    1. Close the Motor client, if this process created it
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from smarthome import __version__
from smarthome.config import settings
from smarthome.database import close_client, create_client, get_database, ping
from smarthome.dependencies import AppDependencies
from smarthome.exceptions import SmartHomeError
from smarthome.middleware.logging import RequestLoggingMiddleware
from smarthome.middleware.request_id import RequestIDMiddleware, request_id_var
from smarthome.models.resource import RESOURCES
from smarthome.routes import health
from smarthome.routes.resources import build_resource_router
from smarthome.schemas.responses import error_response
from smarthome.services.validator import SchemaValidator

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure root logging once, before anything else logs."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("SmartHome API %s starting up...", __version__)

    client = None
    if getattr(app.state, "dependencies", None) is None:
        client = create_client(settings)
        connected = await ping(client)
        if connected:
            logger.info("Connected to MongoDB database %s", settings.mongodb_database)
        else:
            logger.error("MongoDB is unreachable; requests touching the store will fail")

        try:
            validator = await SchemaValidator.from_directory(settings.schema_dir)
        except Exception:
            logger.critical("Validation schemas failed to load from %s", settings.schema_dir)
            close_client(client)
            raise

        app.state.dependencies = AppDependencies(
            database=get_database(client, settings),
            validator=validator,
            database_connected=connected,
        )

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("SmartHome API shutting down...")
    if client is not None:
        close_client(client)
        app.state.dependencies = None
    logger.info("Shutdown complete.")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Last-resort handlers. Pipeline steps already turn their own failures into
    responses; these only see errors raised outside a step, and answer in the
    same {"status", "message"} envelope.
    """

    @app.exception_handler(SmartHomeError)
    async def handle_app_error(request: Request, exc: SmartHomeError):
        rid = request_id_var.get("")
        logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        return error_response(exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(500)


def create_app(dependencies: Optional[AppDependencies] = None) -> FastAPI:
    app = FastAPI(
        title="SmartHome API",
        description="CRUD API for users and devices backed by MongoDB.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.dependencies = dependencies

    # Executes in reverse order of addition: RequestID -> Logging -> CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    for resource in RESOURCES:
        app.include_router(build_resource_router(resource))

    return app


app = create_app()
