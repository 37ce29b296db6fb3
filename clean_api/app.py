"""
Clean Architecture API - Main FastAPI Application.

Wires configuration, logging, persistence, the exception handlers and the
routers into one application.
"""

import os
import platform
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .database import db_manager
from .errors import register_exception_handlers
from .logging_config import get_logger, setup_logging
from .metrics import metrics_endpoint, track_request_metrics
from .metrics_middleware import PrometheusMiddleware
from .persistence.seed import run_seeding
from .routers import auth, products, users

SERVICE_NAME = "clean-api"

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown events for the application.
    """
    setup_logging(
        log_level=settings.LOG_LEVEL,
        service_name=SERVICE_NAME,
        json_logs=not settings.DEBUG,
    )
    logger.info(
        "Starting service",
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
    )

    await db_manager.connect()
    await db_manager.create_all()

    if settings.SEED_DATABASE:
        async with db_manager.unit_of_work() as uow:
            await run_seeding(uow.session)
        logger.info("Database seeding completed")

    yield

    logger.info("Shutting down service")
    await db_manager.disconnect()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title=settings.APP_NAME,
        description="Product catalog API with token authentication and role-based access",
        version=settings.APP_VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)

    register_exception_handlers(application)

    application.include_router(auth.router)
    application.include_router(products.router)
    application.include_router(users.router)

    application.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    application.add_api_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)

    return application


async def health_check() -> dict:
    """Health check endpoint with system information."""
    db_healthy = False
    try:
        db_healthy = await db_manager.ping()
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))

    return {
        "status": "healthy" if db_healthy else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "connected" if db_healthy else "disconnected",
        "system": {
            "machine_name": platform.node(),
            "operating_system": platform.platform(),
            "processor_count": os.cpu_count(),
            "runtime_version": platform.python_version(),
        },
    }


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("clean_api.app:app", host=settings.HOST, port=settings.PORT, log_level="info")
