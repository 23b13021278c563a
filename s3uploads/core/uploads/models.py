"""
Domain models for the upload pipeline.

These are plain dataclasses with no knowledge of S3, HTTP or the host
platform's storage format. Persisted settings use the host's key names
(accessKeyId, path, ...); the mapping lives in SettingsStore.
"""

from dataclasses import dataclass
from typing import Optional


PLUGIN_ID = "s3-file-uploads"

DEFAULT_REGION = "us-east-1"

DEFAULT_ALLOWED_IMAGE_TYPES = frozenset({
    "image/png",
    "image/jpeg",
    "image/pjpeg",
    "image/jpg",
    "image/gif",
    "image/svg+xml",
})


@dataclass(frozen=True)
class UploadSettings:
    """
    Effective configuration for writing objects.

    Frozen so a settings reload swaps the whole snapshot instead of
    mutating fields under an in-flight upload.
    """
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: str = DEFAULT_REGION
    bucket: str = ""
    host: str = ""
    key_path_prefix: str = ""

    @property
    def has_credentials(self) -> bool:
        """Credentials are only used when both halves are present."""
        return bool(self.access_key_id and self.secret_access_key)

    def connection_key(self) -> tuple:
        """Fields the storage connection is built from."""
        if self.has_credentials:
            return (self.access_key_id, self.secret_access_key, self.region)
        return (None, None, self.region)


@dataclass
class UploadedFile:
    """
    A file or image as handed over by the host platform.

    `url` is only meaningful for images; when present it is preferred
    over `path` as the source location.
    """
    name: str
    size: int
    path: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class UploadRequest:
    """A validated upload, ready to be read and written."""
    source_path: str
    declared_name: str
    declared_size_bytes: int
    owner_id: str


@dataclass(frozen=True)
class UploadResult:
    """What the caller gets back: the original filename and its public URL."""
    name: str
    url: str
