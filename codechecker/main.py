"""ASGI entry point: ``uvicorn codechecker.main:app``."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from codechecker.api.v1 import compare, health
from codechecker.core.config import Settings, get_settings
from codechecker.core.errors import BaseApplicationError
from codechecker.core.logging import LogEvent, configure_logging, get_logger
from codechecker.core.middleware import RequestContextMiddleware, application_error_handler, error_handler

logger = get_logger(__name__)


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            LogEvent.APP_STARTED,
            version=settings.version,
            environment=settings.environment.value,
            similarity_threshold=settings.similarity_threshold,
            fast_compare_mode=settings.fast_compare_mode,
            max_lcs_cells=settings.max_lcs_cells,
        )
        try:
            yield
        finally:
            logger.info(LogEvent.APP_STOPPED)

    return lifespan


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs, log_file=settings.log_file)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        description="Near-duplicate detection for student Python submissions.",
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        lifespan=_lifespan(settings),
    )

    # Browsers reject credentials together with a "*" origin
    origins = settings.get_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=settings.cors_allow_credentials and origins != ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(BaseApplicationError, application_error_handler)
    app.add_exception_handler(Exception, error_handler)

    app.include_router(health.router, prefix=f"{settings.api_v1_prefix}/health", tags=["health"])
    app.include_router(compare.router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "name": settings.project_name,
            "version": settings.version,
            "docs": "/docs",
            "api_prefix": settings.api_v1_prefix,
        }

    @app.get(settings.api_v1_prefix, include_in_schema=False)
    async def api_root():
        prefix = settings.api_v1_prefix
        return {
            "version": "v1",
            "endpoints": {
                "health": f"{prefix}/health",
                "tokenize": f"{prefix}/tokenize",
                "compare": f"{prefix}/compare",
                "reports": f"{prefix}/reports",
            },
        }

    Instrumentator(excluded_handlers=["/metrics"]).instrument(app).expose(app, include_in_schema=False)
    return app


app = create_app()
