"""
Host platform implementations for running standalone.

When embedded in a real content platform, the platform provides its own
HostPlatform. These two cover local development and a single-node
deployment:

- InMemoryHostPlatform: settings live in a dict (lost on restart)
- JsonFileHostPlatform: settings live in a JSON file on disk
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)


class InMemoryHostPlatform:
    """
    Host platform backed by dictionaries.

    `config` mirrors the host's global config object; `maximumFileSize`
    is read from it on every validation.
    """

    def __init__(
        self,
        maximum_file_size: Union[int, str] = 2048,
        settings: Optional[dict[str, dict[str, Any]]] = None,
        host_logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config: dict[str, Any] = {"maximumFileSize": maximum_file_size}
        self._settings: dict[str, dict[str, Any]] = settings or {}
        self.logger = host_logger or logging.getLogger("s3uploads.host")

    async def get_settings(self, plugin_id: str) -> dict[str, Any]:
        return dict(self._settings.get(plugin_id, {}))

    async def set_settings(self, plugin_id: str, values: Mapping[str, Any]) -> None:
        self._settings.setdefault(plugin_id, {}).update(values)

    def maximum_file_size(self) -> Union[int, str]:
        return self.config["maximumFileSize"]


class JsonFileHostPlatform(InMemoryHostPlatform):
    """
    Host platform that persists plugin settings to a JSON file.

    The file holds one object per plugin id. A missing file reads as no
    settings; it is created on the first save.
    """

    def __init__(
        self,
        path: Union[str, Path],
        maximum_file_size: Union[int, str] = 2048,
        host_logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(maximum_file_size=maximum_file_size, host_logger=host_logger)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, dict[str, Any]]:
        if not self._path.exists():
            return {}
        return json.loads(self._path.read_text(encoding="utf-8") or "{}")

    def _write(self, data: dict[str, dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self._path)

    async def get_settings(self, plugin_id: str) -> dict[str, Any]:
        data = await asyncio.to_thread(self._read)
        return dict(data.get(plugin_id, {}))

    async def set_settings(self, plugin_id: str, values: Mapping[str, Any]) -> None:
        data = await asyncio.to_thread(self._read)
        data.setdefault(plugin_id, {}).update(values)
        await asyncio.to_thread(self._write, data)

        logger.debug(
            "Wrote plugin settings",
            extra={"plugin_id": plugin_id, "path": str(self._path)}
        )
