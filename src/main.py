"""
Messenger Relay ASGI application.

``create_app`` assembles the FastAPI instance; the module-level ``app`` is
what uvicorn serves. The channel registry lives on ``app.state`` and is
built at startup unless the caller passes one in.
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import api_router
from src.api.middleware.logging_middleware import (
    RequestContextMiddleware,
    REQUEST_ID_HEADER,
    PROCESS_TIME_HEADER,
)
from src.config.constants import SERVICE_NAME, SERVICE_VERSION, SERVICE_DESCRIPTION, SIGNATURE_HEADER
from src.config.settings import Settings, get_settings
from src.core.channels.channel_factory import ChannelRegistry
from src.exceptions.base_exceptions import setup_exception_handlers
from src.utils.logger import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the channel registry on startup and close its HTTP pools on shutdown."""
    settings: Settings = app.state.settings
    setup_logging(settings.LOG_LEVEL.value, settings.LOG_FORMAT)

    owns_registry = app.state.channel_registry is None
    if owns_registry:
        app.state.channel_registry = ChannelRegistry.from_settings(settings)

    logger.info(
        "Messenger Relay started",
        version=SERVICE_VERSION,
        environment=settings.ENVIRONMENT.value,
        graph_api_version=settings.GRAPH_API_VERSION,
        credentials=settings.credential_status()
    )

    try:
        yield
    finally:
        if owns_registry:
            await app.state.channel_registry.close()
            app.state.channel_registry = None
        logger.info("Messenger Relay stopped")


def create_app(
        settings: Optional[Settings] = None,
        registry: Optional[ChannelRegistry] = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Settings to use instead of the cached environment settings
        registry: Pre-built channel registry; built at startup when omitted
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Messenger Relay API",
        description=SERVICE_DESCRIPTION,
        version=SERVICE_VERSION,
        docs_url=None if settings.is_production() else "/docs",
        redoc_url=None if settings.is_production() else "/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.channel_registry = registry

    setup_middleware(app, settings)
    setup_exception_handlers(app)
    app.include_router(api_router)

    return app


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Request context first, CORS outermost."""
    app.middleware("http")(RequestContextMiddleware())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials="*" not in settings.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS", "HEAD"],
        allow_headers=["Content-Type", "Accept", REQUEST_ID_HEADER, SIGNATURE_HEADER],
        expose_headers=[REQUEST_ID_HEADER, PROCESS_TIME_HEADER]
    )


def main() -> None:
    """Run the relay under uvicorn with the configured host and port."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL.value, settings.LOG_FORMAT)

    options = {
        "host": settings.HOST,
        "port": settings.PORT,
        "log_level": settings.LOG_LEVEL.value.lower(),
        "access_log": False,
        "server_header": False,
    }
    if settings.is_development() and settings.DEBUG:
        options.update(reload=True, reload_dirs=["src"])

    logger.info("Starting uvicorn", service=SERVICE_NAME, host=settings.HOST, port=settings.PORT)
    uvicorn.run("src.main:app", **options)


app = create_app()

if __name__ == "__main__":
    main()
