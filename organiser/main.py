"""
Interview Organiser API - FastAPI Application

Main entry point for the API server.
Run with: uvicorn organiser.main:app --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from organiser.config.settings import settings
from organiser.config.database import check_db_connection, init_db
from organiser.endpoints import api_router
from organiser.middleware.auth import AuthMiddleware
from organiser.middleware.error_handler import setup_exception_handlers
from organiser.middleware.logging import REQUEST_ID_HEADER, LoggingMiddleware, configure_logging

# Configure structured logging
configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info(
        "Starting Interview Organiser API",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        environment=settings.ENVIRONMENT,
        enforce_status_transitions=settings.ENFORCE_STATUS_TRANSITIONS,
    )

    if not check_db_connection():
        logger.error("Database unreachable at startup")

    # Create tables directly in dev mode; otherwise run alembic
    if settings.DEBUG:
        logger.info("Initializing database tables (DEBUG mode)")
        try:
            init_db()
        except Exception as e:
            logger.error("Failed to initialize database", error=str(e))

    yield

    logger.info("Shutting down Interview Organiser API")


def create_app() -> FastAPI:
    """Build the application with middleware, handlers and routes."""
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Interview scheduling and lifecycle management",
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        openapi_url="/api/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    setup_exception_handlers(application)

    # Middleware added last runs first
    application.add_middleware(AuthMiddleware)
    application.add_middleware(LoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    application.include_router(api_router, prefix="/api/v1")

    # Root health endpoint (for load balancers)
    @application.get("/health")
    async def root_health():
        """Simple health check for load balancer."""
        return {"status": "ok", "version": settings.APP_VERSION}

    @application.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/api/docs" if settings.DEBUG else None,
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "organiser.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
