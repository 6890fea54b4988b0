import logging
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cityhealth.application.api.v1.errors import map_cityhealth_error
from cityhealth.application.api.v1.routes import (
    assets,
    chatbot,
    health,
    navigation,
    providers,
    search,
    suggestions,
)
from cityhealth.application.di import create_container
from cityhealth.application.shell import ApplicationShell
from cityhealth.config import Config, configure_logging
from cityhealth.domain.i18n.service.translator import Translator
from cityhealth.domain.shared.error import CityHealthError
from cityhealth.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container

    # Listeners track views and favorites made through the API
    shell = ApplicationShell(container)
    await shell.boot()
    app.state.shell = shell

    yield

    await container.close()


def create_app(config: Config | None = None) -> FastAPI:
    """Create FastAPI application."""
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    configure_logging(config.logging)
    logger.info("Starting %s server v%s", config.server.name, config.server.version)

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    logfire.instrument_httpx()
    logfire.instrument_fastapi(app_instance)

    container = create_container(config)
    setup_dishka(container, app_instance)

    app_instance.include_router(health.router, prefix="/api/v1")
    app_instance.include_router(search.router, prefix="/api/v1")
    app_instance.include_router(suggestions.router, prefix="/api/v1")
    app_instance.include_router(providers.router, prefix="/api/v1")
    app_instance.include_router(chatbot.router, prefix="/api/v1")
    app_instance.include_router(navigation.router, prefix="/api/v1")
    app_instance.include_router(assets.router)

    # Domain and infrastructure errors become localized JSON responses
    @app_instance.exception_handler(CityHealthError)
    async def cityhealth_error_handler(request: Request, exc: CityHealthError):
        translator = await request.app.state.dishka_container.get(Translator)
        http_exc = map_cityhealth_error(exc, translator)
        logger.info(
            "%s %s failed: %s (%s)", request.method, request.url.path, exc.code, exc.message
        )
        return JSONResponse(
            status_code=http_exc.status_code,
            content=http_exc.detail,
        )

    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app_instance
