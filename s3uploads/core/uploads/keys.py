"""Object key construction."""

import os
from typing import Optional
from uuid import uuid4


def normalize_prefix(configured_path: Optional[str]) -> str:
    """
    Turn the configured key path into a key prefix.

    Always ends with a slash unless empty; never starts with one, since
    S3 keys must not start with "/".
    """
    prefix = configured_path or "/"

    if not prefix.endswith("/"):
        prefix += "/"

    if prefix.startswith("/"):
        prefix = prefix[1:]

    return prefix


def file_extension(filename: str) -> str:
    """Extension including the leading dot, or "" when there is none."""
    return os.path.splitext(os.path.basename(filename))[1]


def build_key(filename: str, configured_path: Optional[str] = None) -> str:
    """Unique object key: <prefix><uuid4><extension>."""
    return f"{normalize_prefix(configured_path)}{uuid4()}{file_extension(filename)}"
