"""
Host platform capability interface.

The upload pipeline only needs three things from the platform it is
plugged into: a key-value settings store, a logger, and the current
maximum file size. Anything else (routing, admin pages, CSRF) stays on
the host side.
"""

import logging
from typing import Any, Mapping, Protocol, Union


class HostPlatform(Protocol):
    """
    What the upload pipeline needs from its host.

    Using a Protocol means tests can provide an in-memory host and a
    real platform can adapt its own settings API without subclassing.
    """

    logger: logging.Logger

    async def get_settings(self, plugin_id: str) -> dict[str, Any]:
        """Return persisted settings for a plugin. Empty dict if none."""
        ...

    async def set_settings(self, plugin_id: str, values: Mapping[str, Any]) -> None:
        """Merge values into the persisted settings for a plugin."""
        ...

    def maximum_file_size(self) -> Union[int, str]:
        """Current maximum upload size in kilobytes. Read on every call."""
        ...
