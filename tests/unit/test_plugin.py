"""Tests for the plugin lifecycle hooks."""

from s3uploads.config.settings import Settings
from s3uploads.core.uploads import PLUGIN_ID
from s3uploads.infrastructure.host import InMemoryHostPlatform, JsonFileHostPlatform
from s3uploads.infrastructure.storage import MockStorageClient
from s3uploads.plugin import SECRET_MASK, create_plugin, storage_connection_factory


def make_settings(**overrides) -> Settings:
    values = {
        "s3_uploads_bucket": "env-bucket",
        "aws_access_key_id": None,
        "aws_secret_access_key": None,
        "storage_mock_mode": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestLifecycle:

    async def test_init_applies_saved_settings(self, factory):
        host = InMemoryHostPlatform(settings={PLUGIN_ID: {"bucket": "saved-bucket"}})
        plugin = create_plugin(make_settings(), host=host, connection_factory=factory)

        await plugin.init()

        assert plugin.service.settings.bucket == "saved-bucket"

    async def test_activate_ignores_other_plugins(self, factory):
        host = InMemoryHostPlatform()
        plugin = create_plugin(make_settings(), host=host, connection_factory=factory)
        await host.set_settings(PLUGIN_ID, {"bucket": "later-bucket"})

        await plugin.activate("some-other-plugin")
        assert plugin.settings.bucket == "env-bucket"

        await plugin.activate(PLUGIN_ID)
        assert plugin.settings.bucket == "later-bucket"

    async def test_deactivate_resets_connection(self, factory):
        plugin = create_plugin(make_settings(), connection_factory=factory)
        plugin.service.connection()

        plugin.deactivate("some-other-plugin")
        plugin.service.connection()
        assert len(factory.calls) == 1

        plugin.deactivate(PLUGIN_ID)
        plugin.service.connection()
        assert len(factory.calls) == 2

    async def test_save_settings_applies_immediately(self, factory):
        plugin = create_plugin(make_settings(), connection_factory=factory)

        await plugin.save_settings({"bucket": "new-bucket", "path": "/files"})

        assert plugin.settings.bucket == "new-bucket"
        assert plugin.settings.key_path_prefix == "/files"

    async def test_masked_secret_is_not_saved(self, factory):
        host = InMemoryHostPlatform()
        plugin = create_plugin(make_settings(), host=host, connection_factory=factory)
        await plugin.save_settings({"accessKeyId": "key", "secretAccessKey": "real-secret"})

        await plugin.save_settings({"accessKeyId": "key2", "secretAccessKey": SECRET_MASK})

        saved = await host.get_settings(PLUGIN_ID)
        assert saved["secretAccessKey"] == "real-secret"
        assert plugin.settings.access_key_id == "key2"

    async def test_public_settings_masks_secret(self, factory):
        plugin = create_plugin(make_settings(), connection_factory=factory)
        await plugin.save_settings({"accessKeyId": "key", "secretAccessKey": "real-secret"})

        public = plugin.public_settings()

        assert public["secretAccessKey"] == SECRET_MASK
        assert public["accessKeyId"] == "key"
        assert public["bucket"] == "env-bucket"


class TestCreatePlugin:

    def test_uses_json_file_host_when_configured(self, tmp_path):
        plugin = create_plugin(make_settings(settings_file=str(tmp_path / "s.json")))

        assert isinstance(plugin.host, JsonFileHostPlatform)

    def test_uses_in_memory_host_by_default(self):
        plugin = create_plugin(make_settings())

        assert isinstance(plugin.host, InMemoryHostPlatform)
        assert plugin.host.maximum_file_size() == 2048

    def test_allowed_image_types_come_from_settings(self):
        plugin = create_plugin(make_settings(allowed_image_types="image/png, image/gif"))

        assert plugin.service.validator.allowed_image_types == {"image/png", "image/gif"}


class TestStorageConnectionFactory:

    def test_mock_mode_shares_one_client(self):
        factory = storage_connection_factory(mock_mode=True)
        settings = make_settings().upload_defaults()

        first = factory(settings)

        assert isinstance(first, MockStorageClient)
        assert factory(settings) is first
