"""
Upload endpoints.

These play the host platform's part: the multipart body is spooled to a
temporary file and handed to the upload service as an on-disk file,
exactly as a host would after parsing the request itself.
"""

import asyncio
import logging
import os
import shutil
import tempfile
from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from ...core.uploads import (
    InvalidMimeTypeError,
    MissingInputError,
    OversizeInputError,
    UploadError,
    UploadedFile,
)
from ...core.uploads.keys import file_extension
from ..dependencies import UploadServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_STATUS = {
    MissingInputError: status.HTTP_400_BAD_REQUEST,
    OversizeInputError: status.HTTP_413_CONTENT_TOO_LARGE,
    InvalidMimeTypeError: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
}


class UploadResponse(BaseModel):
    """Response after a successful upload."""
    name: str = Field(description="Original filename")
    url: str = Field(description="Public URL of the stored object")


def _spool_to_disk(upload: UploadFile) -> str:
    """Copy the request body to a named temp file and return its path."""
    suffix = file_extension(upload.filename or "")
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        upload.file.seek(0)
        shutil.copyfileobj(upload.file, tmp)
        return tmp.name


def _status_for(error: UploadError) -> int:
    for error_type, code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return code
    return status.HTTP_502_BAD_GATEWAY


async def _handle(service, upload: UploadFile, uid: str, is_image: bool) -> UploadResponse:
    path = await asyncio.to_thread(_spool_to_disk, upload)
    try:
        uploaded = UploadedFile(
            name=upload.filename or os.path.basename(path),
            size=os.path.getsize(path),
            path=path,
        )

        if is_image:
            result = await service.upload_image(uploaded, uid)
        else:
            result = await service.upload_file(uploaded, uid)

    except UploadError as e:
        raise HTTPException(status_code=_status_for(e), detail=e.message)
    finally:
        await asyncio.to_thread(os.unlink, path)

    return UploadResponse(name=result.name, url=result.url)


@router.post(
    "/image",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an image",
)
async def upload_image(
    image: Annotated[UploadFile, File(description="PNG, JPEG, GIF or SVG image")],
    uid: Annotated[str, Form(description="Id of the uploading user")],
    service: UploadServiceDep,
) -> UploadResponse:
    return await _handle(service, image, uid, is_image=True)


@router.post(
    "/file",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a file",
)
async def upload_file(
    file: Annotated[UploadFile, File(description="Any file")],
    uid: Annotated[str, Form(description="Id of the uploading user")],
    service: UploadServiceDep,
) -> UploadResponse:
    return await _handle(service, file, uid, is_image=False)
