"""
Shared fixtures.

Everything here runs without network access: the host platform is the
in-memory implementation, storage is either the in-memory mock or S3
mocked by moto.
"""

import boto3
import pytest
from moto import mock_aws

from s3uploads.core.uploads import UploadService, UploadSettings
from s3uploads.infrastructure.host import InMemoryHostPlatform
from s3uploads.infrastructure.storage import MockStorageClient

TEST_BUCKET = "test-bucket"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 92


class RecordingFactory:
    """Connection factory that hands out one mock client and counts calls."""

    def __init__(self) -> None:
        self.client = MockStorageClient()
        self.calls: list[UploadSettings] = []

    def __call__(self, settings: UploadSettings) -> MockStorageClient:
        self.calls.append(settings)
        return self.client


@pytest.fixture
def host() -> InMemoryHostPlatform:
    return InMemoryHostPlatform(maximum_file_size=1024)


@pytest.fixture
def upload_settings() -> UploadSettings:
    return UploadSettings(bucket=TEST_BUCKET, key_path_prefix="uploads")


@pytest.fixture
def factory() -> RecordingFactory:
    return RecordingFactory()


@pytest.fixture
def service(upload_settings, host, factory) -> UploadService:
    return UploadService(settings=upload_settings, host=host, connection_factory=factory)


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "a.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so botocore never looks for real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3_bucket(aws_credentials):
    """A moto-backed bucket; yields a boto3 client for assertions."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=TEST_BUCKET)
        yield client
