"""
FastAPI dependency injection.

Dependencies provide the plugin, its upload service and configuration to
route handlers. The plugin itself is created once by the app factory and
kept on `app.state`, so its memoized storage connection is shared by all
requests.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from ..config.settings import Settings
from ..core.uploads import UploadService
from ..plugin import S3UploadsPlugin

logger = logging.getLogger(__name__)

# Admin key security scheme
admin_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with (see create_app)."""
    return request.app.state.settings


# ---------------------------------------------------------------------------
# Admin Guard
# ---------------------------------------------------------------------------

async def verify_admin_key(
    settings: Annotated[Settings, Depends(get_app_settings)],
    api_key: str = Security(admin_key_header),
) -> str:
    """
    Validate the admin key from the request header.

    Stands in for the host's admin-session middleware when running
    standalone. Raises 403 if the key is missing or unknown.
    """
    if not api_key:
        logger.warning("Admin request missing API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key required. Provide X-API-Key header.",
        )

    if api_key not in settings.admin_api_keys_list:
        logger.warning(
            "Invalid admin key attempt",
            extra={"key_prefix": api_key[:8]}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_plugin(request: Request) -> S3UploadsPlugin:
    """Provide the plugin created by the app factory."""
    return request.app.state.plugin


def get_upload_service(
    plugin: Annotated[S3UploadsPlugin, Depends(get_plugin)],
) -> UploadService:
    """Provide the shared upload service."""
    return plugin.service


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

AdminKey = Annotated[str, Depends(verify_admin_key)]
PluginDep = Annotated[S3UploadsPlugin, Depends(get_plugin)]
UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
