import json
from datetime import datetime
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError

from chess_daily.infra.config.settings import settings
from chess_daily.core.logger.logger import logger
from chess_daily.api.router import health, puzzles, attempts, users
from chess_daily.api.middleware.logging.request_logging import RequestLoggingMiddleware
from chess_daily.core.dependencies import ServiceContainer, build_container
from chess_daily.core.exceptions.handler import ServiceError, GlobalErrorHandler
from chess_daily.core.service.puzzle.catalog import seed_catalog

def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the application.

    A prebuilt container can be passed in (tests); otherwise one is built at
    startup from settings.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="""
Daily Chess Puzzle API - one puzzle a day, three attempts, personalized recommendations.

## Services
- **Daily puzzle**: Deterministic puzzle of the day
- **Attempts**: Scored move submissions, at most three per puzzle
- **Recommendations**: Puzzles matched to each player's skill and favourite themes
        """,
        version=settings.APP_VERSION,
        docs_url="/",
        redoc_url="/redoc"
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
        max_age=600,  # 10 minutes
    )

    # Request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Add centralized error handlers
    app.add_exception_handler(ServiceError, GlobalErrorHandler.service_error_handler)
    app.add_exception_handler(RequestValidationError, GlobalErrorHandler.validation_error_handler)
    app.add_exception_handler(Exception, GlobalErrorHandler.general_exception_handler)

    # Include routers
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(puzzles.router, prefix="/api/v1")
    app.include_router(attempts.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")

    app.state.services = container

    @app.on_event("startup")
    async def startup_event():
        logger.info(json.dumps({
            "message": "Starting Chess Daily API",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION
        }))

        if app.state.services is None:
            app.state.services = await build_container(settings)

        if settings.SEED_CATALOG_ON_STARTUP:
            await seed_catalog(app.state.services.repository)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(json.dumps({
            "message": "Shutting down Chess Daily API",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION
        }))
        if app.state.services is not None:
            await app.state.services.close()

    return app
