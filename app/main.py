"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from app.config import Settings, get_settings
from app.database import Database
from app.routers import users_router, properties_router
from app.services.identity import GoogleIdentityVerifier
from app.services.error_handler import ErrorHandlerService
from app.middleware.request_logging import RequestLoggingMiddleware
from app.utils.exceptions import APIException, ServiceUnavailableError

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    identity_verifier: Optional[GoogleIdentityVerifier] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use; defaults to the cached environment settings
        database: Pre-built database service (tests pass an in-memory one)
        identity_verifier: Pre-built identity verifier (tests pass a fake)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.
        Handles startup and shutdown events.
        """
        # Startup
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Environment: {settings.environment}")

        db: Database = app.state.database

        if settings.create_tables_on_startup:
            await db.create_tables()

        if not await db.ping():
            logger.error("Failed to connect to database on startup")

        yield

        # Shutdown
        logger.info("Shutting down application")
        await db.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
    Property listing catalog backend.

    ## Features

    * **Users**: Registration, username/password login and Google Sign-In
    * **Properties**: CRUD for listings with geographic coordinates
    * **Images**: Photo URLs stored with each property and replaced atomically on update
    """,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "Users",
                "description": "User registration and login"
            },
            {
                "name": "Properties",
                "description": "Property listing management"
            },
            {
                "name": "Health",
                "description": "System health endpoints"
            }
        ],
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database or Database(settings.database_url, echo=settings.debug)
    app.state.identity_verifier = identity_verifier or GoogleIdentityVerifier(settings.google_client_id)

    # Add request logging middleware
    app.add_middleware(
        RequestLoggingMiddleware,
        enable_request_logging=not settings.is_testing,
        slow_request_threshold=2.0,  # Log requests slower than 2 seconds
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Processing-Time"],
    )

    # Include API routers
    app.include_router(users_router)
    app.include_router(properties_router)

    _register_exception_handlers(app)
    _register_health_routes(app, settings)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    # Global exception handlers using ErrorHandlerService
    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        """Handle custom API exceptions with structured error responses."""
        return ErrorHandlerService.handle_api_exception(exc, request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors as 400 with the first violated constraint."""
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors with generic error responses."""
        return ErrorHandlerService.handle_database_error(exc, request)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle framework HTTP exceptions with structured error responses."""
        return ErrorHandlerService.handle_http_exception(exc, request)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with secure error responses."""
        return ErrorHandlerService.handle_unexpected_error(exc, request)


def _register_health_routes(app: FastAPI, settings: Settings) -> None:
    @app.get("/", tags=["Health"])
    async def root():
        """
        Root endpoint providing basic API information.
        """
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "environment": settings.environment,
            "documentation": {
                "swagger_ui": "/docs",
                "redoc": "/redoc",
                "openapi_json": "/openapi.json"
            }
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint with database connectivity test.
        Used by container health checks and load balancers.
        """
        db: Database = request.app.state.database

        if not await db.ping():
            raise ServiceUnavailableError("Database connection failed")

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "database": "connected"
        }


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=app.state.settings.host,
        port=app.state.settings.port,
        reload=app.state.settings.debug
    )
