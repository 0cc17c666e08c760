"""Main FastAPI application entry point"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tradehub.api.auth import router as auth_router
from tradehub.api.errors import register_exception_handlers
from tradehub.api.health import router as health_router
from tradehub.api.profiles import router as profiles_router
from tradehub.api.users import router as users_router
from tradehub.api.verification import router as verification_router
from tradehub.config import Settings
from tradehub.database import build_engine, build_session_factory, create_tables
from tradehub.services.auth_service import PasswordHasher, TokenService

logger = logging.getLogger(__name__)

API_TITLE = "TradeHub API"
API_VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The settings object is the only configuration the app reads; everything
    that needs it (engine, token service, storage) is built from it here.

    Run with ``uvicorn tradehub.main:create_app --factory``.
    """
    settings = settings or Settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.environment == "development":
            # Production schemas come from alembic
            await create_tables(engine)
        logger.info(f"{API_TITLE} started ({settings.environment})")
        yield
        await engine.dispose()
        logger.info(f"{API_TITLE} stopped")

    app = FastAPI(
        title=API_TITLE,
        description="Marketplace identity and profile API for homeowners, professionals and suppliers",
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    # Object storage is created on first upload (see api.dependencies.get_storage)
    app.state.storage = None

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(verification_router)
    app.include_router(profiles_router)
    app.include_router(users_router)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": API_TITLE,
            "version": API_VERSION,
            "status": "running",
        }

    return app
