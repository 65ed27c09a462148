"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chatop.api import auth, messages, rentals, uploads, users
from chatop.api.dependencies import authenticate_request
from chatop.config import Settings, get_settings
from chatop.errors import register_exception_handlers
from chatop.logging_config import setup_logging
from chatop.services.passwords import PasswordHasher
from chatop.services.storage import ImageStorage
from chatop.services.tokens import TokenService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    tokens = app.state.token_service
    logger.info("Serving with %s tokens valid for %s", tokens.algorithm, tokens.ttl)
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    The token service is built here, before any request is served, so a bad
    signing key stops the process at startup.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Chatop API",
        description="Rental listings with tenant-to-owner inquiry messaging",
        version="0.1.0",
        lifespan=lifespan,
        dependencies=[Depends(authenticate_request)],
    )

    app.state.settings = settings
    app.state.token_service = TokenService.from_settings(settings)
    app.state.password_hasher = PasswordHasher(settings.bcrypt_rounds)
    app.state.image_storage = ImageStorage.from_settings(settings)

    # CORS middleware for development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:4200", "http://localhost:3000"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(rentals.router)
    app.include_router(messages.router)
    app.include_router(uploads.router)

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    app.mount("/images", StaticFiles(directory=settings.upload_dir), name="images")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "environment": settings.environment}

    return app


app = create_app()
