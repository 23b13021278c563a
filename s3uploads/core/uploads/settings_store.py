"""
Settings resolution.

Persisted plugin settings are merged over environment defaults one field
at a time. A persisted value only wins when it is non-empty, so clearing
a field in the admin page falls back to the environment again.
"""

import logging
from typing import Any, Mapping, Optional

from .errors import StorageFailureError, wrap_error
from .host import HostPlatform
from .models import DEFAULT_REGION, PLUGIN_ID, UploadSettings

logger = logging.getLogger(__name__)

# Persisted key -> UploadSettings field
PERSISTED_FIELDS = {
    "accessKeyId": "access_key_id",
    "secretAccessKey": "secret_access_key",
    "region": "region",
    "bucket": "bucket",
    "host": "host",
    "path": "key_path_prefix",
}


def merge_settings(
    persisted: Mapping[str, Any],
    defaults: UploadSettings,
) -> UploadSettings:
    """
    Merge persisted values over environment defaults.

    Credentials fall back to None, region to us-east-1, everything else
    to an empty string.
    """
    def pick(key: str, fallback: Optional[str]) -> Optional[str]:
        value = persisted.get(key)
        if value:
            return str(value)
        return fallback

    return UploadSettings(
        access_key_id=pick("accessKeyId", defaults.access_key_id) or None,
        secret_access_key=pick("secretAccessKey", defaults.secret_access_key) or None,
        region=pick("region", defaults.region) or DEFAULT_REGION,
        bucket=pick("bucket", defaults.bucket) or "",
        host=pick("host", defaults.host) or "",
        key_path_prefix=pick("path", defaults.key_path_prefix) or "",
    )


class SettingsStore:
    """
    Loads and saves the plugin's settings through the host platform.

    Holds the last resolved snapshot in `current`. Loading never mutates
    a snapshot in place; it replaces it.
    """

    def __init__(
        self,
        host: HostPlatform,
        defaults: Optional[UploadSettings] = None,
        plugin_id: str = PLUGIN_ID,
    ) -> None:
        self._host = host
        self._defaults = defaults or UploadSettings()
        self._plugin_id = plugin_id
        self._current = self._defaults

    @property
    def current(self) -> UploadSettings:
        return self._current

    @property
    def defaults(self) -> UploadSettings:
        return self._defaults

    async def load(self) -> UploadSettings:
        """
        Fetch persisted settings and resolve the effective configuration.

        Raises a wrapped StorageFailureError if the host store cannot be
        reached; the previous snapshot stays in place.
        """
        try:
            persisted = await self._host.get_settings(self._plugin_id) or {}
        except Exception as e:
            raise wrap_error(
                StorageFailureError(f"settings fetch failed: {e}"),
                self._host.logger,
            ) from e

        self._current = merge_settings(persisted, self._defaults)

        logger.info(
            "Loaded upload settings",
            extra={
                "bucket": self._current.bucket,
                "region": self._current.region,
                "host": self._current.host,
                "has_credentials": self._current.has_credentials,
            }
        )

        return self._current

    async def save(self, values: Mapping[str, Any]) -> UploadSettings:
        """
        Persist the known keys from `values`, then reload.

        Unknown keys are dropped. Values are stored as strings; an empty
        string clears the persisted value.
        """
        filtered = {
            key: "" if value is None else str(value)
            for key, value in values.items()
            if key in PERSISTED_FIELDS
        }

        try:
            await self._host.set_settings(self._plugin_id, filtered)
        except Exception as e:
            raise wrap_error(
                StorageFailureError(f"settings save failed: {e}"),
                self._host.logger,
            ) from e

        logger.info("Saved upload settings", extra={"keys": sorted(filtered)})

        return await self.load()
