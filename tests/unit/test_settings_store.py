"""Tests for settings resolution and persistence."""

import json

import pytest

from s3uploads.config.settings import Settings
from s3uploads.core.uploads import (
    PLUGIN_ID,
    SettingsStore,
    StorageFailureError,
    UploadSettings,
    merge_settings,
)
from s3uploads.infrastructure.host import InMemoryHostPlatform, JsonFileHostPlatform

ENV_DEFAULTS = UploadSettings(
    access_key_id="env-key",
    secret_access_key="env-secret",
    region="eu-west-1",
    bucket="env-bucket",
    host="env.example.com",
    key_path_prefix="env/",
)


class TestMergeSettings:

    def test_persisted_values_win(self):
        merged = merge_settings(
            {"bucket": "saved-bucket", "path": "saved/", "accessKeyId": "saved-key"},
            ENV_DEFAULTS,
        )

        assert merged.bucket == "saved-bucket"
        assert merged.key_path_prefix == "saved/"
        assert merged.access_key_id == "saved-key"
        assert merged.secret_access_key == "env-secret"
        assert merged.host == "env.example.com"

    def test_empty_persisted_values_fall_back_to_environment(self):
        merged = merge_settings({"bucket": "", "host": None}, ENV_DEFAULTS)

        assert merged.bucket == "env-bucket"
        assert merged.host == "env.example.com"

    def test_nothing_set_gives_empty_strings_and_default_region(self):
        merged = merge_settings({}, UploadSettings(region=""))

        assert merged.bucket == ""
        assert merged.host == ""
        assert merged.key_path_prefix == ""
        assert merged.region == "us-east-1"
        assert merged.access_key_id is None
        assert not merged.has_credentials

    def test_half_credentials_are_not_usable(self):
        merged = merge_settings({"accessKeyId": "only-key"}, UploadSettings())

        assert merged.access_key_id == "only-key"
        assert not merged.has_credentials
        assert merged.connection_key() == (None, None, "us-east-1")


class TestSettingsStore:

    async def test_load_merges_host_settings(self):
        host = InMemoryHostPlatform(settings={PLUGIN_ID: {"bucket": "saved-bucket"}})
        store = SettingsStore(host, ENV_DEFAULTS)

        settings = await store.load()

        assert settings.bucket == "saved-bucket"
        assert settings.region == "eu-west-1"
        assert store.current is settings

    async def test_current_starts_as_defaults(self, host):
        store = SettingsStore(host, ENV_DEFAULTS)

        assert store.current == ENV_DEFAULTS

    async def test_load_failure_is_wrapped_and_keeps_previous_snapshot(self, host):
        async def broken(plugin_id):
            raise OSError("settings database down")

        host.get_settings = broken
        store = SettingsStore(host, ENV_DEFAULTS)

        with pytest.raises(StorageFailureError, match="settings database down") as exc_info:
            await store.load()

        assert exc_info.value.wrapped
        assert store.current == ENV_DEFAULTS

    async def test_save_filters_unknown_keys_and_reloads(self, host):
        store = SettingsStore(host, ENV_DEFAULTS)

        settings = await store.save({"bucket": "new-bucket", "evil": "x", "region": None})

        assert settings.bucket == "new-bucket"
        assert settings.region == "eu-west-1"
        assert await host.get_settings(PLUGIN_ID) == {"bucket": "new-bucket", "region": ""}


class TestJsonFileHostPlatform:

    async def test_missing_file_reads_as_empty(self, tmp_path):
        host = JsonFileHostPlatform(tmp_path / "settings.json")

        assert await host.get_settings(PLUGIN_ID) == {}

    async def test_settings_survive_a_new_instance(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        await JsonFileHostPlatform(path).set_settings(PLUGIN_ID, {"bucket": "b1"})
        await JsonFileHostPlatform(path).set_settings(PLUGIN_ID, {"host": "cdn"})

        assert await JsonFileHostPlatform(path).get_settings(PLUGIN_ID) == {
            "bucket": "b1",
            "host": "cdn",
        }
        assert json.loads(path.read_text())[PLUGIN_ID]["bucket"] == "b1"


class TestEnvironmentDefaults:

    def test_environment_variables_feed_upload_defaults(self, monkeypatch):
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIAEXAMPLE")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")
        monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-south-1")
        monkeypatch.setenv("S3_UPLOADS_BUCKET", "env-bucket")
        monkeypatch.setenv("S3_UPLOADS_HOST", "cdn.example.com")
        monkeypatch.setenv("S3_UPLOADS_PATH", "/files")

        defaults = Settings(_env_file=None).upload_defaults()

        assert defaults == UploadSettings(
            access_key_id="AKIAEXAMPLE",
            secret_access_key="secret",
            region="ap-south-1",
            bucket="env-bucket",
            host="cdn.example.com",
            key_path_prefix="/files",
        )

    def test_region_defaults_to_us_east_1(self, monkeypatch):
        monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)

        assert Settings(_env_file=None).upload_defaults().region == "us-east-1"

    def test_missing_bucket_is_reported_when_required(self, monkeypatch):
        monkeypatch.delenv("S3_UPLOADS_BUCKET", raising=False)

        assert Settings(_env_file=None).validate_required_fields() == ["S3_UPLOADS_BUCKET"]
        assert Settings(_env_file=None, require_bucket=False).validate_required_fields() == []
