"""
The upload service.

Validates an incoming file, reads it, writes it to object storage under a
fresh key and returns the public URL. The storage connection is created
lazily from the current settings and kept until `reset()`.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol

from .errors import MissingInputError, wrap_error
from .host import HostPlatform
from .keys import build_key
from .models import (
    DEFAULT_ALLOWED_IMAGE_TYPES,
    UploadRequest,
    UploadResult,
    UploadSettings,
    UploadedFile,
)
from .validation import Validator, guess_mime_type

logger = logging.getLogger(__name__)

PUBLIC_READ = "public-read"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
OWNER_METADATA_KEY = "owner-id"


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class ObjectStorage(Protocol):
    """
    Interface for the object store uploads are written to.

    The service doesn't care whether this is boto3 against AWS, an
    S3-compatible endpoint or the in-memory mock.
    """

    async def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        acl: str = PUBLIC_READ,
    ) -> None:
        """Write one object. Raises on failure."""
        ...


ConnectionFactory = Callable[[UploadSettings], ObjectStorage]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def content_type_for(filename: str) -> str:
    """Content-Type header value for a stored object."""
    return f"{guess_mime_type(filename) or DEFAULT_CONTENT_TYPE}; charset=utf-8"


def public_url(settings: UploadSettings, key: str) -> str:
    """
    Public URL for an object key.

    A configured host is used as-is when it carries a scheme and gets
    http:// otherwise. Without a host the bucket's own https endpoint
    is used.
    """
    host = f"https://{settings.bucket}.s3.amazonaws.com"

    if settings.host:
        host = settings.host
        if not host.startswith("http"):
            host = "http://" + host

    return f"{host}/{key}"


async def read_source(path: str) -> bytes:
    """Read the whole file without blocking the event loop."""
    return await asyncio.to_thread(Path(path).read_bytes)


# ---------------------------------------------------------------------------
# Upload Service
# ---------------------------------------------------------------------------

class UploadService:
    """
    Uploads files and images on behalf of the host platform.

    Each call is independent; several may be in flight at once. Settings
    and the connection are swapped by `reload()` and `reset()` without
    locking, so an upload racing a reload uses whichever snapshot it
    read first.
    """

    def __init__(
        self,
        settings: UploadSettings,
        host: HostPlatform,
        connection_factory: ConnectionFactory,
        allowed_image_types: Iterable[str] = DEFAULT_ALLOWED_IMAGE_TYPES,
    ) -> None:
        self._settings = settings
        self._host = host
        self._connection_factory = connection_factory
        self._connection: Optional[ObjectStorage] = None
        self._validator = Validator(host, allowed_image_types)

    @property
    def settings(self) -> UploadSettings:
        return self._settings

    @property
    def validator(self) -> Validator:
        return self._validator

    def reload(self, settings: UploadSettings) -> None:
        """
        Swap in a new settings snapshot.

        The connection is dropped when credentials or region changed,
        since the client does not pick those up on its own.
        """
        if settings.connection_key() != self._settings.connection_key():
            self.reset()
        self._settings = settings

        logger.debug("Reloaded upload service settings", extra={"bucket": settings.bucket})

    def reset(self) -> None:
        """Forget the storage connection; the next upload builds a new one."""
        if self._connection is not None:
            logger.info("Storage connection reset")
        self._connection = None

    def connection(self) -> ObjectStorage:
        """Memoized storage connection built from the current settings."""
        if self._connection is None:
            self._connection = self._connection_factory(self._settings)
        return self._connection

    async def upload_image(
        self,
        image: Optional[UploadedFile],
        owner_id: str,
    ) -> UploadResult:
        """
        Validate and upload an image.

        Raises:
            UploadError: MissingInputError, OversizeInputError,
                InvalidMimeTypeError or StorageFailureError, already
                wrapped and logged.
        """
        try:
            if image is None:
                raise MissingInputError("[[error:invalid-image]]")

            self._validator.check_maximum_size(image.size)
            path = self._validator.image_path(image)
            self._validator.check_image_mime_type(path)

            request = UploadRequest(
                source_path=path,
                declared_name=image.name,
                declared_size_bytes=image.size,
                owner_id=str(owner_id),
            )
            return await self._upload(request)
        except Exception as e:
            raise wrap_error(e, self._host.logger)

    async def upload_file(
        self,
        file: Optional[UploadedFile],
        owner_id: str,
    ) -> UploadResult:
        """Validate and upload a generic file. Raises like upload_image."""
        try:
            if file is None:
                raise MissingInputError("[[error:invalid-file]]")

            self._validator.check_maximum_size(file.size)
            path = self._validator.file_path(file)

            request = UploadRequest(
                source_path=path,
                declared_name=file.name,
                declared_size_bytes=file.size,
                owner_id=str(owner_id),
            )
            return await self._upload(request)
        except Exception as e:
            raise wrap_error(e, self._host.logger)

    async def _upload(self, request: UploadRequest) -> UploadResult:
        """Read the source and write it as a public object."""
        body = await read_source(request.source_path)

        settings = self._settings
        filename = request.declared_name
        key = build_key(filename, settings.key_path_prefix)

        await self.connection().put_object(
            bucket=settings.bucket,
            key=key,
            body=body,
            content_type=content_type_for(filename),
            metadata={OWNER_METADATA_KEY: request.owner_id},
            acl=PUBLIC_READ,
        )

        url = public_url(settings, key)

        logger.info(
            "Uploaded object",
            extra={
                "key": key,
                "size_bytes": len(body),
                "owner_id": request.owner_id,
            }
        )

        return UploadResult(name=filename, url=url)
