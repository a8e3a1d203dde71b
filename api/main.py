"""
FastAPI application for the fire safety operations backend.

This module creates and configures the FastAPI application, registering
all routers, middleware and exception handlers.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import Settings, settings as default_settings
from api.routers import customers, dashboard, jobs, upload
from api.schemas.common import ErrorResponse, HealthCheckResponse
from services.errors import NotFoundError, StoreUnavailable, ValidationError
from services.seed_service import seed_sample_data
from services.storage_service import IStorage, create_storage

logger = logging.getLogger(__name__)


def configure_logging(config: Settings):
    """Configure root logging with a file and a console handler."""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format=config.LOG_FORMAT,
        handlers=[
            logging.FileHandler(config.LOG_FILE),
            logging.StreamHandler()
        ]
    )


def _error_response(request: Request, status_code: int, error: str, detail: Optional[dict] = None):
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            detail=detail,
            path=str(request.url)
        ).model_dump(mode='json')
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds the storage backend on startup (unless one was injected) and
    releases it on shutdown.
    """
    config: Settings = app.state.settings

    # Startup
    logger.info(f"Starting {config.API_TITLE} v{config.API_VERSION}")

    owns_storage = app.state.storage is None
    if owns_storage:
        app.state.storage = create_storage(
            config.STORAGE_BACKEND,
            database_url=config.DATABASE_URL,
            pool_pre_ping=config.DB_POOL_PRE_PING,
            echo=config.DEBUG
        )

    if config.SEED_SAMPLE_DATA:
        seed_sample_data(app.state.storage)

    yield

    # Shutdown
    logger.info("Shutting down application")
    if owns_storage:
        app.state.storage.close()
        app.state.storage = None


def create_app(settings: Optional[Settings] = None, storage: Optional[IStorage] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Application settings (default: loaded from environment)
        storage: Pre-built storage backend; when omitted the lifespan
                 creates one from settings

    Returns:
        Configured FastAPI application
    """
    config = settings or default_settings
    configure_logging(config)

    app = FastAPI(
        title=config.API_TITLE,
        description=config.API_DESCRIPTION,
        version=config.API_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )
    app.state.settings = config
    app.state.storage = storage

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=config.CORS_ALLOW_METHODS,
        allow_headers=config.CORS_ALLOW_HEADERS
    )

    # Exception handlers

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        """Invalid input or violated data constraint."""
        logger.warning(f"Validation failed on {request.url.path}: {exc}")
        return _error_response(
            request, status.HTTP_400_BAD_REQUEST, str(exc),
            {"errors": exc.errors} if exc.errors else None
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed request body or parameters."""
        errors = [
            {'loc': '.'.join(str(part) for part in err['loc']), 'msg': err['msg']}
            for err in exc.errors()
        ]
        logger.warning(f"Invalid request on {request.url.path}: {errors}")
        return _error_response(
            request, status.HTTP_400_BAD_REQUEST, "Invalid request data", {"errors": errors}
        )

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(request: Request, exc: NotFoundError):
        """Operation addressed a missing record."""
        return _error_response(
            request, status.HTTP_404_NOT_FOUND, str(exc),
            {"entity": exc.entity, "id": exc.record_id}
        )

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        """Backing store failure."""
        logger.error(f"Storage failure on {request.url.path}: {exc}")
        return _error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage unavailable",
            {"message": str(exc)} if config.DEBUG else None
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render HTTP errors in the standard error format."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail), path=str(request.url)).model_dump(mode='json'),
            headers=getattr(exc, 'headers', None)
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return _error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error",
            {"message": str(exc)} if config.DEBUG else None
        )

    # Register routers with API prefix
    app.include_router(customers.router, prefix=config.API_PREFIX)
    app.include_router(jobs.router, prefix=config.API_PREFIX)
    app.include_router(dashboard.router, prefix=config.API_PREFIX)
    app.include_router(upload.router, prefix=config.API_PREFIX)

    # Root endpoints

    @app.get('/', include_in_schema=False)
    async def root():
        """
        Root endpoint - service information.
        """
        return {
            'message': f'Welcome to {config.API_TITLE}',
            'version': config.API_VERSION,
            'docs': '/docs',
            'redoc': '/redoc',
            'openapi': '/openapi.json'
        }

    @app.get('/health', response_model=HealthCheckResponse, tags=['health'])
    async def health_check(request: Request):
        """
        Health check endpoint.

        Checks that the storage backend answers a lookup.

        **Example:**
        ```bash
        curl http://localhost:8000/health
        ```
        """
        health_status = {
            'status': 'healthy',
            'timestamp': datetime.utcnow(),
            'version': config.API_VERSION,
            'storage_backend': config.STORAGE_BACKEND,
            'storage': 'unknown'
        }

        storage = request.app.state.storage
        if storage is None:
            health_status['storage'] = 'not initialized'
            health_status['status'] = 'unhealthy'
        else:
            try:
                storage.get_customer('health-check')
                health_status['storage'] = 'connected'
            except StoreUnavailable as e:
                logger.error(f"Storage health check failed: {e}")
                health_status['storage'] = 'disconnected'
                health_status['status'] = 'unhealthy'

        return HealthCheckResponse(**health_status)

    @app.get('/api/ping', tags=['health'])
    async def ping():
        """
        Simple ping endpoint for load balancers.

        **Returns:**
        ```json
        {"ping": "pong"}
        ```
        """
        return {'ping': 'pong'}

    # Middleware for request logging

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests."""
        logger.info(f"{request.method} {request.url.path}")
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    return app


app = create_app()


if __name__ == '__main__':
    import uvicorn

    uvicorn.run(
        'api.main:app',
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.RELOAD,
        log_level=default_settings.LOG_LEVEL.lower()
    )
