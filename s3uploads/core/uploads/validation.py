"""
Upload validation: size limits, image types and source path resolution.

Error details are host translation keys, e.g. [[error:file-too-big, "2048"]].
"""

import mimetypes
import re
from typing import Iterable, Optional, Union

from .errors import InvalidMimeTypeError, MissingInputError, OversizeInputError
from .host import HostPlatform
from .models import DEFAULT_ALLOWED_IMAGE_TYPES, UploadedFile


def guess_mime_type(path: str) -> Optional[str]:
    """MIME type inferred from the extension of a path or URL."""
    return mimetypes.guess_type(path)[0]


def parse_kilobytes(value: Union[int, float, str]) -> int:
    """
    Leading integer of a config value: "2048.0" -> 2048, " 512KB" -> 512.

    Raises ValueError when the value has no leading integer at all.
    """
    match = re.match(r"\s*([+-]?\d+)", str(value))
    if match is None:
        raise ValueError(f"maximumFileSize is not a number: {value!r}")
    return int(match.group(1))


class Validator:
    """
    Checks an incoming file against the host's limits.

    The maximum size is read from the host on every call, so a change
    made in the host's config takes effect on the next upload.
    """

    def __init__(
        self,
        host: HostPlatform,
        allowed_image_types: Iterable[str] = DEFAULT_ALLOWED_IMAGE_TYPES,
    ) -> None:
        self._host = host
        self._allowed_image_types = frozenset(allowed_image_types)

    @property
    def allowed_image_types(self) -> frozenset[str]:
        return self._allowed_image_types

    def check_maximum_size(self, size_bytes: int) -> None:
        maximum = self._host.maximum_file_size()
        if size_bytes > parse_kilobytes(maximum) * 1024:
            raise OversizeInputError(f'[[error:file-too-big, "{maximum}"]]')

    def check_image_mime_type(self, path: str) -> None:
        if guess_mime_type(path) not in self._allowed_image_types:
            raise InvalidMimeTypeError("[[error:invalid-image-extension]]")

    @staticmethod
    def image_path(image: UploadedFile) -> str:
        """Remote url wins over local path."""
        path = image.url or image.path
        if not path:
            raise MissingInputError("[[error:invalid-image]]")
        return path

    @staticmethod
    def file_path(file: UploadedFile) -> str:
        if not file.path:
            raise MissingInputError("[[error:invalid-file]]")
        return file.path
