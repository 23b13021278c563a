"""
Upload error taxonomy.

Every failure leaving the upload pipeline is an UploadError. Its message
uses the host's bracketed translation format so the host can localize it:

    [[s3-uploads:upload-error, <detail>]]

where <detail> is usually itself a host translation key such as
[[error:invalid-image]].
"""

import logging
from typing import Optional


ERROR_CODE = "s3-uploads:upload-error"
LOG_PREFIX = "[s3-file-uploads]"


class UploadError(Exception):
    """Base class for every error surfaced by the upload pipeline."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        self.wrapped = False
        super().__init__(detail)

    @property
    def message(self) -> str:
        if self.wrapped:
            return f"[[{ERROR_CODE}, {self.detail}]]"
        return self.detail

    def __str__(self) -> str:
        return self.message


class MissingInputError(UploadError):
    """No image/file object was given, or it has no usable path."""


class OversizeInputError(UploadError):
    """The declared size exceeds the host's maximum file size."""


class InvalidMimeTypeError(UploadError):
    """The image extension maps to a MIME type outside the allow-list."""


class StorageFailureError(UploadError):
    """Settings could not be fetched, or reading/writing the object failed."""


def wrap_error(
    err: BaseException,
    logger: Optional[logging.Logger] = None,
) -> UploadError:
    """
    Normalize any failure into a wrapped UploadError and log it.

    Errors already wrapped are returned untouched so a failure crossing
    several layers is logged and prefixed exactly once. Anything that is
    not an UploadError becomes a StorageFailureError chained to the
    original exception.
    """
    if isinstance(err, UploadError):
        if err.wrapped:
            return err
        upload_error = err
    else:
        upload_error = StorageFailureError(str(err) or type(err).__name__)
        upload_error.__cause__ = err

    upload_error.wrapped = True

    (logger or logging.getLogger(__name__)).error(
        "%s %s",
        LOG_PREFIX,
        upload_error.message,
        extra={"error_type": type(upload_error).__name__},
    )

    return upload_error
