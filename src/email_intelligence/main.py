"""
FastAPI application entry point for the Email Intelligence Service.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from email_intelligence.api.error_handlers import EXCEPTION_HANDLERS
from email_intelligence.api.middleware import RequestTracingMiddleware
from email_intelligence.api.routes import router
from email_intelligence.config import Settings, settings as default_settings
from email_intelligence.container import ServiceContainer, build_container
from email_intelligence.logging_config import configure_logging
from email_intelligence.sources.http_provider import HttpEmailDataProvider

# Configure structured logging before anything else logs
configure_logging(default_settings.LOG_LEVEL, default_settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)


def build_default_container(settings: Settings) -> ServiceContainer:
    """Container backed by the HTTP mail gateway for messages and threads."""
    gateway = HttpEmailDataProvider(
        base_url=settings.EMAIL_SOURCE_BASE_URL,
        timeout=settings.EMAIL_SOURCE_TIMEOUT_SECONDS,
    )
    return build_container(settings, email_provider=gateway, thread_provider=gateway)


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (defaults to the environment)
        container: Prebuilt components; when omitted, one is built at startup
            from settings with the HTTP mail gateway as email source
    """
    settings = settings or (container.settings if container else default_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "container", None) is None:
            app.state.container = build_default_container(settings)
        logger.info(
            "Application startup",
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
            llm_provider=settings.LLM_PROVIDER,
            economy_llm_provider=settings.ECONOMY_LLM_PROVIDER or settings.LLM_PROVIDER,
        )
        try:
            yield
        finally:
            await app.state.container.aclose()
            logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.APP_NAME,
        description="LLM-backed email categorization, cold outreach detection and context extraction",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(RequestTracingMiddleware)

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    app.include_router(router)

    if settings.PROMETHEUS_ENABLED:
        app.mount("/metrics", make_asgi_app())

    @app.get("/", tags=["operations"])
    async def root():
        """Service info with documentation links."""
        return {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health",
            "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "email_intelligence.main:app",
        host=default_settings.API_HOST,
        port=default_settings.API_PORT,
        reload=default_settings.DEBUG,
    )


if __name__ == "__main__":
    run()
