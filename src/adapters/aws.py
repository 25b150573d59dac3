from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any, cast

import boto3
from botocore.client import BaseClient

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBClient
    from mypy_boto3_s3 import S3Client
else:
    DynamoDBClient = BaseClient  # type: ignore[misc,assignment]
    S3Client = BaseClient  # type: ignore[misc,assignment]

DEFAULT_TABLE_PREFIX = "transit"
DEFAULT_CACHE_KEY = "transit-snapshots/collections.json.gz"


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


@dataclass(frozen=True, slots=True)
class AwsRuntimeConfig:
    """AWS settings for the DynamoDB data store and the S3 snapshot cache.

    Env vars:
      - AWS_REGION (default: eu-west-1)
      - ENDPOINT_URL, USE_LOCALSTACK, LOCALSTACK_ENDPOINT_URL
      - DDB_TABLE_PREFIX (default: transit)
      - SNAPSHOT_CACHE_BUCKET (cache disabled when unset)
      - SNAPSHOT_CACHE_KEY (default: transit-snapshots/collections.json.gz)
    """

    use_localstack: bool
    region: str
    endpoint_url: str | None
    table_prefix: str = DEFAULT_TABLE_PREFIX
    cache_bucket: str | None = None
    cache_key: str = DEFAULT_CACHE_KEY

    @staticmethod
    def from_env() -> "AwsRuntimeConfig":
        return AwsRuntimeConfig(
            use_localstack=env_bool("USE_LOCALSTACK", False),
            region=os.getenv("AWS_REGION", "eu-west-1"),
            endpoint_url=_env_str("ENDPOINT_URL"),
            table_prefix=_env_str("DDB_TABLE_PREFIX") or DEFAULT_TABLE_PREFIX,
            cache_bucket=_env_str("SNAPSHOT_CACHE_BUCKET"),
            cache_key=(_env_str("SNAPSHOT_CACHE_KEY") or DEFAULT_CACHE_KEY).strip("/"),
        )

    def resolved_endpoint_url(self) -> str | None:
        """Return the endpoint URL to use for boto3.

        Priority:
          1) ENDPOINT_URL (explicit override; preferred for LocalStack)
          2) LOCALSTACK_ENDPOINT_URL if USE_LOCALSTACK is enabled
          3) None (AWS real)
        """

        if self.endpoint_url:
            return self.endpoint_url
        if self.use_localstack:
            return os.getenv("LOCALSTACK_ENDPOINT_URL", "http://localhost:4566")
        return None


@lru_cache(maxsize=8)
def _client(service: str, region: str, endpoint_url: str | None) -> BaseClient:
    # boto3 clients are thread-safe; the stores call them from worker threads.
    session = boto3.session.Session(region_name=region)
    return cast(BaseClient, cast(Any, session).client(service, endpoint_url=endpoint_url))


def s3_client() -> S3Client:
    cfg = AwsRuntimeConfig.from_env()
    return cast(S3Client, _client("s3", cfg.region, cfg.resolved_endpoint_url()))


def dynamodb_client() -> DynamoDBClient:
    cfg = AwsRuntimeConfig.from_env()
    return cast(
        DynamoDBClient, _client("dynamodb", cfg.region, cfg.resolved_endpoint_url())
    )
