"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
The AWS/S3 fields are only defaults: settings saved through the admin
routes are merged over them when the plugin loads.

Mock mode enables local development without an S3 bucket.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.uploads.models import DEFAULT_ALLOWED_IMAGE_TYPES, DEFAULT_REGION, UploadSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like admin_api_keys), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "S3 File Uploads"
    api_version: str = "v1"
    admin_api_keys: str = Field(
        default="dev-admin-key",
        description="Comma-separated keys accepted on the admin settings routes."
    )

    # AWS / S3 defaults (AWS_ACCESS_KEY_ID, S3_UPLOADS_BUCKET, ...)
    aws_access_key_id: Optional[str] = Field(
        default=None,
        description="Default access key id. Saved plugin settings take precedence."
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        description="Default secret access key. Saved plugin settings take precedence."
    )
    aws_default_region: str = Field(
        default=DEFAULT_REGION,
        description="Default AWS region for the S3 client"
    )
    s3_uploads_bucket: str = Field(
        default="",
        description="Bucket that receives uploads"
    )
    s3_uploads_host: str = Field(
        default="",
        description="Public host used in returned URLs. Empty means <bucket>.s3.amazonaws.com"
    )
    s3_uploads_path: str = Field(
        default="",
        description="Key prefix under which uploads are stored"
    )
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Custom S3 endpoint (MinIO, localstack). None uses AWS."
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real S3. Enables local dev without a bucket."
    )

    # Upload policy
    maximum_file_size: int = Field(
        default=2048,
        description="Maximum upload size in kilobytes"
    )
    allowed_image_types: str = Field(
        default=",".join(sorted(DEFAULT_ALLOWED_IMAGE_TYPES)),
        description="Comma-separated MIME types accepted for image uploads"
    )
    require_bucket: bool = Field(
        default=True,
        description="Report the service as not ready while no bucket is configured"
    )

    # Host platform
    settings_file: Optional[str] = Field(
        default=None,
        description="JSON file holding saved plugin settings. None keeps them in memory."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def admin_api_keys_list(self) -> list[str]:
        """Parse comma-separated admin keys into a list."""
        return [key.strip() for key in self.admin_api_keys.split(",") if key.strip()]

    @property
    def allowed_image_types_set(self) -> frozenset[str]:
        """Parse comma-separated MIME types into a set."""
        return frozenset(
            mime.strip().lower() for mime in self.allowed_image_types.split(",") if mime.strip()
        )

    def upload_defaults(self) -> UploadSettings:
        """Environment values that persisted plugin settings fall back to."""
        return UploadSettings(
            access_key_id=self.aws_access_key_id or None,
            secret_access_key=self.aws_secret_access_key or None,
            region=self.aws_default_region or DEFAULT_REGION,
            bucket=self.s3_uploads_bucket,
            host=self.s3_uploads_host,
            key_path_prefix=self.s3_uploads_path,
        )

    def validate_required_fields(self) -> list[str]:
        """
        Return the names of required settings that are missing.

        Only the environment is checked here. A bucket saved through the
        admin routes satisfies the requirement at runtime, so callers
        treat this as a warning.
        """
        missing = []

        if self.require_bucket and not self.s3_uploads_bucket:
            missing.append("S3_UPLOADS_BUCKET")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
