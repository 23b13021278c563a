"""
Plugin lifecycle.

Ties the settings store and the upload service to the host's lifecycle
signals: init on startup, activate/deactivate when an administrator
toggles the plugin, and saves from the admin settings page.
"""

import logging
from typing import Any, Mapping, Optional

from .config.settings import Settings
from .core.uploads import (
    PLUGIN_ID,
    HostPlatform,
    SettingsStore,
    UploadService,
    UploadSettings,
)
from .core.uploads.service import ConnectionFactory, ObjectStorage
from .infrastructure.host import InMemoryHostPlatform, JsonFileHostPlatform
from .infrastructure.storage import MockStorageClient, StorageConfig, create_storage_client

logger = logging.getLogger(__name__)

SECRET_MASK = "********"


class S3UploadsPlugin:
    """
    The plugin as seen by the host.

    Exposes the upload service plus the hooks the host fires. Settings are
    resolved by the store and pushed into the service with `reload()`.
    """

    def __init__(
        self,
        host: HostPlatform,
        store: SettingsStore,
        service: UploadService,
        plugin_id: str = PLUGIN_ID,
    ) -> None:
        self.host = host
        self.store = store
        self.service = service
        self.plugin_id = plugin_id

    @property
    def settings(self) -> UploadSettings:
        return self.service.settings

    async def init(self) -> UploadSettings:
        """Load persisted settings on startup."""
        settings = await self.store.load()
        self.service.reload(settings)
        return settings

    async def activate(self, plugin_id: str) -> None:
        if plugin_id == self.plugin_id:
            self.service.reload(await self.store.load())

    def deactivate(self, plugin_id: str) -> None:
        if plugin_id == self.plugin_id:
            self.service.reset()

    async def save_settings(self, values: Mapping[str, Any]) -> UploadSettings:
        """
        Persist settings from the admin page and apply them right away.

        A secret equal to the mask shown by `public_settings()` means
        "unchanged" and is not written back.
        """
        values = dict(values)
        if values.get("secretAccessKey") == SECRET_MASK:
            del values["secretAccessKey"]

        settings = await self.store.save(values)
        self.service.reload(settings)
        return settings

    def public_settings(self) -> dict[str, Any]:
        """Current settings in persisted form, with the secret masked."""
        settings = self.settings
        return {
            "accessKeyId": settings.access_key_id or "",
            "secretAccessKey": SECRET_MASK if settings.secret_access_key else "",
            "region": settings.region,
            "bucket": settings.bucket,
            "host": settings.host,
            "path": settings.key_path_prefix,
        }


def storage_connection_factory(
    endpoint_url: Optional[str] = None,
    mock_mode: bool = False,
) -> ConnectionFactory:
    """
    Build the factory the upload service uses for its connection.

    In mock mode every call returns the same in-memory client so objects
    survive a connection reset.
    """
    mock_client: Optional[MockStorageClient] = None

    def factory(settings: UploadSettings) -> ObjectStorage:
        nonlocal mock_client

        if mock_mode:
            if mock_client is None:
                mock_client = create_storage_client(mock_mode=True)
            return mock_client

        config = StorageConfig(
            region=settings.region,
            access_key_id=settings.access_key_id if settings.has_credentials else None,
            secret_access_key=settings.secret_access_key if settings.has_credentials else None,
            endpoint_url=endpoint_url,
        )
        return create_storage_client(config=config)

    return factory


def create_plugin(
    settings: Settings,
    host: Optional[HostPlatform] = None,
    connection_factory: Optional[ConnectionFactory] = None,
) -> S3UploadsPlugin:
    """
    Assemble the plugin from application settings.

    Without an explicit host, settings are kept in `settings_file` when
    one is configured and in memory otherwise.
    """
    if host is None:
        if settings.settings_file:
            host = JsonFileHostPlatform(
                settings.settings_file,
                maximum_file_size=settings.maximum_file_size,
            )
        else:
            host = InMemoryHostPlatform(maximum_file_size=settings.maximum_file_size)

    defaults = settings.upload_defaults()
    store = SettingsStore(host, defaults)
    service = UploadService(
        settings=defaults,
        host=host,
        connection_factory=connection_factory or storage_connection_factory(
            endpoint_url=settings.s3_endpoint_url,
            mock_mode=settings.storage_mock_mode,
        ),
        allowed_image_types=settings.allowed_image_types_set,
    )

    logger.debug(
        "Created plugin",
        extra={"host_type": type(host).__name__, "mock_mode": settings.storage_mock_mode}
    )

    return S3UploadsPlugin(host=host, store=store, service=service)
