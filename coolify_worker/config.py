"""
Coolify Worker Configuration
============================

Single source of truth for all configuration values.
Reads from environment variables once at startup; the resulting
objects are immutable and passed explicitly to each component.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class CoolifyConfig:
    """Control-plane connection and deployment target."""
    api_url: str = ""
    api_token: str = ""
    api_prefix: Optional[str] = None
    server_uuid: str = ""
    environment_name: str = "production"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url and self.api_token)


@dataclass(frozen=True)
class StorageConfig:
    """Object store holding the static site content."""
    public_endpoint: str = "https://minio.example.com"
    bucket: str = "merfy-sites"


@dataclass(frozen=True)
class SiteImageConfig:
    """Repository of the nginx front end that proxies site content from the bucket."""
    repository: str = "https://github.com/Merfy-Dropshipping-Platform/nginx-minio-proxy"
    branch: str = "main"


@dataclass(frozen=True)
class WorkerConfig:
    """Master configuration for the worker."""

    coolify: CoolifyConfig = field(default_factory=CoolifyConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    site_image: SiteImageConfig = field(default_factory=SiteImageConfig)

    port: int = 3116
    log_level: str = "INFO"
    log_format: str = "json"
    readiness_timeout_seconds: float = 3.0
    provisioning_log_max_records: int = 1000

    @classmethod
    def from_env(cls) -> "WorkerConfig":
        """Load configuration from environment variables."""
        return cls(
            coolify=CoolifyConfig(
                api_url=os.environ.get("COOLIFY_API_URL", ""),
                api_token=os.environ.get("COOLIFY_API_TOKEN", ""),
                api_prefix=os.environ.get("COOLIFY_API_PREFIX") or None,
                server_uuid=os.environ.get("COOLIFY_SERVER_UUID", ""),
                environment_name=os.environ.get("COOLIFY_ENVIRONMENT_NAME") or "production",
            ),
            storage=StorageConfig(
                public_endpoint=(
                    os.environ.get("S3_PUBLIC_ENDPOINT")
                    or os.environ.get("MINIO_PUBLIC_ENDPOINT")
                    or os.environ.get("S3_ENDPOINT")
                    or "https://minio.example.com"
                ),
                bucket=os.environ.get("S3_BUCKET") or "merfy-sites",
            ),
            site_image=SiteImageConfig(
                repository=(
                    os.environ.get("NGINX_PROXY_REPO")
                    or "https://github.com/Merfy-Dropshipping-Platform/nginx-minio-proxy"
                ),
                branch=os.environ.get("NGINX_PROXY_BRANCH") or "main",
            ),
            port=int(os.environ.get("PORT", "3116")),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_format=os.environ.get("LOG_FORMAT", "json"),
            readiness_timeout_seconds=float(os.environ.get("READINESS_TIMEOUT_SECONDS", "3.0")),
            provisioning_log_max_records=int(os.environ.get("PROVISIONING_LOG_MAX_RECORDS", "1000")),
        )
