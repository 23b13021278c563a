"""
Object storage client for uploads.

Writes objects to S3 (or an S3-compatible endpoint) with boto3, with a
mock mode for local development.

Mock mode stores objects in memory, enabling API testing without
provisioning a bucket.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """
    Configuration for the S3 client.

    Credentials are optional: when either is missing boto3 falls back to
    its default credential chain (env, shared config, instance role).
    """
    region: str
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    endpoint_url: Optional[str] = None


class S3StorageClient:
    """
    S3 object storage client.

    boto3 is synchronous, so each call runs in a worker thread to keep
    the event loop free while the request is on the wire.
    """

    def __init__(self, config: StorageConfig) -> None:
        import boto3
        from botocore.config import Config

        self._config = config

        credentials = {}
        if config.access_key_id and config.secret_access_key:
            credentials = {
                "aws_access_key_id": config.access_key_id,
                "aws_secret_access_key": config.secret_access_key,
            }

        self._s3_client = boto3.client(
            's3',
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            config=Config(signature_version='s3v4'),
            **credentials,
        )

        logger.info(
            "Initialized S3 storage client",
            extra={
                "region": config.region,
                "endpoint": config.endpoint_url,
                "explicit_credentials": bool(credentials),
            }
        )

    async def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        acl: str = "public-read",
    ) -> None:
        """Upload an object to S3."""
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=bucket,
                ACL=acl,
                Key=key,
                Body=body,
                ContentLength=len(body),
                ContentType=content_type,
                Metadata=metadata,
            )

            logger.debug(
                "Put object",
                extra={"bucket": bucket, "key": key, "size_bytes": len(body)}
            )

        except Exception as e:
            logger.debug(
                "Failed to put object",
                extra={"bucket": bucket, "key": key, "error": str(e)}
            )
            raise StorageError(f"Upload failed: {e}") from e


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

@dataclass
class StoredObject:
    """An object held by the mock client."""
    body: bytes
    content_type: str
    acl: str
    metadata: dict[str, str] = field(default_factory=dict)


class MockStorageClient:
    """
    In-memory storage for local development and tests.

    Objects are kept in a dictionary keyed by (bucket, key). Not suitable
    for production.
    """

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], StoredObject] = {}
        logger.info("Initialized mock storage client (in-memory)")

    async def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        acl: str = "public-read",
    ) -> None:
        """Store object in memory."""
        if not bucket:
            raise StorageError("Upload failed: bucket name is empty")

        self.objects[(bucket, key)] = StoredObject(
            body=body,
            content_type=content_type,
            acl=acl,
            metadata=dict(metadata),
        )

        logger.debug(
            "Stored object in mock storage",
            extra={"bucket": bucket, "key": key, "size_bytes": len(body)}
        )


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
):
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        S3StorageClient or MockStorageClient
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return S3StorageClient(config)
