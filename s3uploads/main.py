"""
FastAPI application entry point.

Runs the upload plugin standalone, with this app standing in for the host
platform: admin settings routes, upload routes and health checks.

For local development:
    uvicorn s3uploads.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from .api.routes import admin, health, uploads
from .config.settings import Settings, get_settings
from .core.uploads import PLUGIN_ID, UploadError
from .plugin import S3UploadsPlugin, create_plugin

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Loads saved plugin settings on startup. If the settings store can't
    be reached the plugin keeps running on environment defaults.
    """
    settings: Settings = app.state.settings
    plugin: S3UploadsPlugin = app.state.plugin

    logger.info(
        "S3 uploads starting",
        extra={"version": settings.api_version, "mock_mode": settings.storage_mock_mode}
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.warning(
            "Missing configuration in environment",
            extra={"missing_fields": missing_fields}
        )

    try:
        await plugin.init()
    except UploadError as e:
        logger.error(
            "Could not load saved settings, using environment defaults",
            extra={"error": e.message}
        )

    yield

    # Shutdown
    plugin.deactivate(PLUGIN_ID)
    logger.info("S3 uploads shutting down")


def create_app(
    settings: Optional[Settings] = None,
    plugin: Optional[S3UploadsPlugin] = None,
) -> FastAPI:
    """
    Application factory.

    Tests pass their own settings and plugin; production uses the
    environment.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Upload files and images to S3 and get back a public URL.

        ## Admin

        Settings routes require an admin key in the `X-API-Key` header.
        Saved settings take precedence over environment defaults and are
        applied immediately.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.plugin = plugin or create_plugin(settings)

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        admin.router,
        prefix=f"/api/admin/plugins/{PLUGIN_ID}",
        tags=["Admin"],
    )

    app.include_router(
        uploads.router,
        prefix="/api/v1/uploads",
        tags=["Uploads"],
    )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Logs the full error server-side and returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error."}
        )

    logger.info(
        "FastAPI application created",
        extra={"title": settings.api_title, "version": settings.api_version}
    )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "s3uploads.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
