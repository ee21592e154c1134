"""FastAPI application setup for CRUD resources."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from restcrud.api.controller import CRUDController
from restcrud.api.exception_handlers import register_exception_handlers
from restcrud.core.config import Settings, get_settings
from restcrud.infrastructure.logging import get_logger, setup_logging
from restcrud.infrastructure.middleware.correlation import CorrelationIDMiddleware

logger = get_logger(__name__)


def create_app(
    *controllers: CRUDController,
    settings: Optional[Settings] = None,
    **fastapi_kwargs
) -> FastAPI:
    """Create a FastAPI application serving the given CRUD controllers.

    Args:
        controllers: Controllers whose routers are included in the application
        settings: Settings to use, the global settings when omitted
        fastapi_kwargs: Extra arguments for the FastAPI constructor

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        setup_logging()
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            environment=settings.environment,
            resources=[controller.type_name for controller in controllers],
        )
        yield
        logger.info("application_shutdown", app_name=settings.app_name)

    fastapi_kwargs.setdefault("title", settings.app_name)
    fastapi_kwargs.setdefault("version", settings.app_version)
    app = FastAPI(lifespan=lifespan, **fastapi_kwargs)
    app.state.is_production = settings.is_production

    app.add_middleware(CorrelationIDMiddleware)
    register_exception_handlers(app)

    for controller in controllers:
        app.include_router(controller.router)

    return app
