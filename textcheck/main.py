"""
Main FastAPI application with logging, DI container, and middleware setup.
"""
from contextlib import asynccontextmanager

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import DishkaRoute
from dishka.integrations import fastapi as fastapi_integration
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from textcheck import __version__
from textcheck.api.exceptions.exception_handlers import register_exception_handlers
from textcheck.api.middlewares.request_context_middleware import RequestContextMiddleware
from textcheck.api.v1.controllers.detection import router as detection_router
from textcheck.core.config import config, Config
from textcheck.core.logging import get_logger, setup_logging
from textcheck.ioc import AppProvider
from textcheck.services.detection_service import DetectionService

setup_logging(
    level="DEBUG" if config.debug else "INFO",
    json_logs=not config.debug,
    service=config.app_name,
    version=__version__,
)

logger = get_logger(__name__)


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with Dishka DI container.

    A prebuilt container can be passed in to wire alternative providers.
    """
    if container is None:
        container = make_async_container(AppProvider(), context={Config: config})

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("application_startup", app_name=config.app_name)
        detection_service = await container.get(DetectionService)
        logger.info(
            "detector_ready",
            provider=detection_service.provider,
            models=detection_service.models,
        )
        yield
        logger.info("application_shutdown", app_name=config.app_name)
        await container.close()

    app = FastAPI(
        title=config.app_name,
        description="Estimates whether text was written by a human or generated by a language model",
        version=__version__,
        lifespan=lifespan,
    )

    fastapi_integration.setup_dishka(container, app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(detection_router)

    return app


health_router = APIRouter(route_class=DishkaRoute, tags=["Health"])


@health_router.get("/health")
async def health_check():
    """
    Basic liveness check endpoint.
    """
    return {"status": "healthy", "service": config.app_name}


@health_router.get("/health/ready")
async def readiness_check():
    """
    Readiness check endpoint.
    """
    return {
        "status": "ready",
        "service": config.app_name,
        "provider": config.provider,
    }


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=config.host, port=config.port)
