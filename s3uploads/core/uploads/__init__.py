"""
Upload pipeline: settings, validation, key construction and the service.
"""

from .errors import (
    InvalidMimeTypeError,
    MissingInputError,
    OversizeInputError,
    StorageFailureError,
    UploadError,
    wrap_error,
)
from .host import HostPlatform
from .keys import build_key, normalize_prefix
from .models import (
    PLUGIN_ID,
    UploadRequest,
    UploadResult,
    UploadSettings,
    UploadedFile,
)
from .service import ObjectStorage, UploadService, public_url
from .settings_store import SettingsStore, merge_settings
from .validation import Validator

__all__ = [
    "InvalidMimeTypeError",
    "MissingInputError",
    "OversizeInputError",
    "StorageFailureError",
    "UploadError",
    "wrap_error",
    "HostPlatform",
    "build_key",
    "normalize_prefix",
    "PLUGIN_ID",
    "UploadRequest",
    "UploadResult",
    "UploadSettings",
    "UploadedFile",
    "ObjectStorage",
    "UploadService",
    "public_url",
    "SettingsStore",
    "merge_settings",
    "Validator",
]
