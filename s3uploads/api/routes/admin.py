"""
Admin settings endpoints.

The admin page has two forms: bucket settings (bucket, host, path,
region) and credentials (access key id, secret). Each is saved on its
own, and saving applies the new settings immediately.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from ...core.uploads import UploadError
from ..dependencies import AdminKey, PluginDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class PluginSettingsResponse(BaseModel):
    """Effective settings, secret masked."""
    accessKeyId: str = ""
    secretAccessKey: str = ""
    region: str
    bucket: str
    host: str
    path: str


class BucketSettingsRequest(BaseModel):
    """Bucket form. Omitted fields are left as they are; "" clears."""
    bucket: Optional[str] = Field(default=None, description="Bucket that receives uploads")
    host: Optional[str] = Field(default=None, description="Public host for returned URLs")
    path: Optional[str] = Field(default=None, description="Key prefix for uploads")
    region: Optional[str] = Field(default=None, description="AWS region")


class CredentialsRequest(BaseModel):
    """Credentials form."""
    accessKeyId: Optional[str] = Field(default=None, description="AWS access key id")
    secretAccessKey: Optional[str] = Field(default=None, description="AWS secret access key")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=PluginSettingsResponse,
    summary="Get plugin settings",
)
async def get_plugin_settings(
    _: AdminKey,
    plugin: PluginDep,
) -> PluginSettingsResponse:
    return PluginSettingsResponse(**plugin.public_settings())


@router.put(
    "/bucket",
    response_model=PluginSettingsResponse,
    summary="Save bucket settings",
)
async def save_bucket_settings(
    request: BucketSettingsRequest,
    _: AdminKey,
    plugin: PluginDep,
) -> PluginSettingsResponse:
    return await _save(plugin, request.model_dump(exclude_none=True))


@router.put(
    "/credentials",
    response_model=PluginSettingsResponse,
    summary="Save credentials",
    description="Stores the credentials in the host's settings store.",
)
async def save_credentials(
    request: CredentialsRequest,
    _: AdminKey,
    plugin: PluginDep,
) -> PluginSettingsResponse:
    return await _save(plugin, request.model_dump(exclude_none=True))


async def _save(plugin, values: dict) -> PluginSettingsResponse:
    try:
        await plugin.save_settings(values)
    except UploadError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        )

    logger.info("Plugin settings saved", extra={"fields": sorted(values)})

    return PluginSettingsResponse(**plugin.public_settings())
