"""
FastAPI application for Service D.

This module serves the fixed landing page at ``/`` and the static files
directory for every other path.
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from api.pages import INDEX_HTML
from api.schemas import HealthResponse, HealthStatus
from core.config import Settings, get_settings
from observability.metrics import RequestMetricsMiddleware, metrics
from observability.tracing import setup_tracing

logger = logging.getLogger("serviced.api")


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("serviced").setLevel(settings.log_level)


# ------------------------------------------------------------------------------
# App
# ------------------------------------------------------------------------------
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the Service D application.

    The index route is registered before the static mount so ``/`` always
    answers with the fixed page. The mount at ``/`` swallows every path
    that reaches it, so it has to be added last.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    static_dir = settings.static_dir

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Service D (static root: %s)", static_dir)
        yield
        logger.info("Shutting down Service D")

    app = FastAPI(
        title="Service D",
        description="Landing page and static file host",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.enable_metrics:
        app.add_middleware(RequestMetricsMiddleware)

    @app.exception_handler(404)
    async def not_found(request: Request, exc):
        logger.debug("No resource for %s %s", request.method, request.url.path)
        return await http_exception_handler(request, exc)

    # --------------------------------------------------------------------------
    # Routes
    # --------------------------------------------------------------------------
    @app.api_route("/", methods=["GET", "HEAD"], response_class=HTMLResponse, include_in_schema=False)
    async def index():
        return HTMLResponse(content=INDEX_HTML, status_code=200)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        exists = static_dir.is_dir()
        return {
            "status": HealthStatus.HEALTHY if exists else HealthStatus.DEGRADED,
            "static_root": str(static_dir),
            "static_root_exists": exists,
        }

    if settings.enable_metrics:
        @app.get("/metrics", include_in_schema=False)
        async def prometheus_metrics():
            body, content_type = metrics.render()
            return Response(content=body, media_type=content_type)

    # --------------------------------------------------------------------------
    # Static files
    # --------------------------------------------------------------------------
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir), name="static")
    else:
        logger.warning("Static directory %s does not exist; only / will be served", static_dir)

    setup_tracing(app, settings)
    return app
