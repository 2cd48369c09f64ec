"""
Main FastAPI application entry point.
Configures the app, middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from typing import Dict, Any

from backoffice.config import settings
from backoffice.infrastructure.db.database import engine
from backoffice.infrastructure.db.models import create_all_tables
from backoffice.infrastructure.web.middleware.error_handler import ErrorHandlerMiddleware
from backoffice.infrastructure.web.routers import contracts, dashboard, payments

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.
    Setup and teardown operations.
    """
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Environment: {settings.environment}")

    create_all_tables(engine)
    logger.info("Database tables ready")

    yield

    logger.info("Shutting down application")
    engine.dispose()


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.
    Interactive docs are not served in production.
    """
    docs_url = None if settings.is_production else f"{settings.api_prefix}/docs"
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=docs_url,
        redoc_url=None,
        openapi_url=None if settings.is_production else f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(ErrorHandlerMiddleware)

    # Include routers
    app.include_router(
        contracts.router,
        prefix=f"{settings.api_prefix}/contracts",
        tags=["Contracts"]
    )
    app.include_router(
        payments.router,
        prefix=f"{settings.api_prefix}/payments",
        tags=["Payments"]
    )
    app.include_router(
        dashboard.router,
        prefix=f"{settings.api_prefix}/dashboard",
        tags=["Dashboard"]
    )

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": docs_url,
            "health": f"{settings.api_prefix}/health"
        }

    @app.get(f"{settings.api_prefix}/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "environment": settings.environment,
            "version": settings.api_version
        }

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        """Custom 404 error handler."""
        detail = getattr(exc, "detail", None)
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "message": detail if detail and detail != "Not Found" else f"The path {request.url.path} was not found",
                "path": request.url.path
            }
        )

    return app


# Create the FastAPI app instance
app = create_application()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backoffice.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
