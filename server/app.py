"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.config import Config
from server.routes import config_status, expand, health, query
from utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup/shutdown logic."""
    logger.info("FastAPI server starting up")

    status = Config().provider_status()
    missing = [provider for provider, configured in status.items() if not configured]
    if missing:
        logger.warning(
            f"No server-side credential for providers: {missing}",
            extra={"extra_fields": {"missing": missing}},
        )

    yield

    logger.info("FastAPI server shutting down")


def create_app() -> FastAPI:
    """Factory function to create FastAPI application."""
    app = FastAPI(
        title="AI Meta Client API",
        description="Multi-provider fan-out with fact aggregation and synthesis",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(config_status.router)
    app.include_router(query.router)
    app.include_router(expand.router)

    return app
