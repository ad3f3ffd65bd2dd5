"""FastAPI application factory.

Learn: App factory pattern. create_app() returns a configured FastAPI
instance. Lifespan logs startup and disposes the database engine on
shutdown; the schema itself is managed by Alembic, not created here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diary_api import __version__
from diary_api.api import api_router
from diary_api.config import settings
from diary_api.middleware.request_id import RequestIdMiddleware
from diary_api.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "diary_api.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        jwt_verify_expiration=settings.jwt_verify_expiration,
    )
    if not settings.jwt_verify_expiration:
        logger.warning("diary_api.token_expiry_disabled")

    yield

    logger.info("diary_api.shutdown")

    from diary_api.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Diary API",
        description="User registration, JWT login and diary entries",
        version=__version__,
        lifespan=lifespan,
    )

    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: diary_api.main:app)
app = create_app()
