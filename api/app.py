"""FastAPI application factory."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import load_config
from core.errors import DomainKeyError, KeyLayoutError
from internal.health import (
    HealthChecker,
    check_event_loop,
    check_clock,
    create_keygen_check,
)
from internal.logging import get_logger, LogLevel, StructuredLogger
from utils.crash import create_async_handler
from api.routes import base62, health, keys

VERSION = "0.7.1"


def create_app(config=None):
    """Create and configure the FastAPI application."""
    config = config or load_config()

    # Configure structured logging
    StructuredLogger.configure(min_level=LogLevel.parse(config.logging.level), service="domain-keys")
    logger_instance = get_logger()

    stats = keys.IssueStats()
    health_checker = HealthChecker()
    health_checker.register("event_loop", check_event_loop, critical=True)
    health_checker.register("clock", check_clock, critical=True)
    health_checker.register("keygen", create_keygen_check(), critical=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger_instance.info("Application starting", version=VERSION, routes=config.keys.routes)
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(create_async_handler(logger_instance))
        logger_instance.info("Application started successfully")

        yield

        # Shutdown
        logger_instance.info("Application shutdown complete", issued=stats.to_dict())

    app = FastAPI(
        title="Domain Keys",
        version=VERSION,
        description="base62 routing and timestamp key service",
        lifespan=lifespan,
    )

    @app.exception_handler(DomainKeyError)
    async def domain_key_error(request: Request, exc: DomainKeyError):
        logger_instance.warn("Request rejected", error=exc.message, path=request.url.path,
                             kind=type(exc).__name__, error_id=exc.error_id)
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(KeyLayoutError)
    async def key_layout_error(request: Request, exc: KeyLayoutError):
        logger_instance.error("Key generator produced a malformed key", error=exc.message,
                              path=request.url.path, error_id=exc.error_id)
        return JSONResponse(status_code=500, content=exc.to_dict())

    # Initialize route modules with dependencies
    keys.init(config.keys, stats)
    health.init(health_checker, stats)

    # Include routers
    app.include_router(keys.router)
    app.include_router(base62.router)
    app.include_router(health.router)

    return app
