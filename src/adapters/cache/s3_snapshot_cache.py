from __future__ import annotations

import gzip
import json
import logging
from dataclasses import dataclass

from src.adapters.aws import AwsRuntimeConfig, s3_client
from src.adapters.records import collections_from_payload, collections_to_payload
from src.app.ports.output import ISnapshotCache
from src.domain.models import TransitCollections

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class S3SnapshotCache(ISnapshotCache):
    """Caches the fetched network collections in S3 as gzipped JSON.

    Best effort: a failed read is a miss and a failed write is only logged,
    so the cache never blocks a search.

    Env vars:
      - SNAPSHOT_CACHE_BUCKET (required)
      - SNAPSHOT_CACHE_KEY (default: transit-snapshots/collections.json.gz)
      - ENDPOINT_URL (preferred for LocalStack)
    """

    bucket: str | None = None
    key: str | None = None

    def _bucket(self) -> str:
        value = self.bucket or AwsRuntimeConfig.from_env().cache_bucket
        if not value:
            raise RuntimeError("Missing SNAPSHOT_CACHE_BUCKET")
        return value

    def _key(self) -> str:
        if self.key:
            return self.key.strip("/")
        return AwsRuntimeConfig.from_env().cache_key

    def get(self) -> TransitCollections | None:
        try:
            obj = s3_client().get_object(Bucket=self._bucket(), Key=self._key())
            payload = json.loads(gzip.decompress(obj["Body"].read()))
            return collections_from_payload(payload)
        except Exception as exc:
            logger.info("Snapshot cache miss: %s", exc)
            return None

    def put(self, collections: TransitCollections) -> None:
        body = gzip.compress(json.dumps(collections_to_payload(collections)).encode())
        try:
            s3_client().put_object(Bucket=self._bucket(), Key=self._key(), Body=body)
        except Exception:
            logger.warning("Failed to write snapshot cache", exc_info=True)

    def invalidate(self) -> None:
        try:
            s3_client().delete_object(Bucket=self._bucket(), Key=self._key())
        except Exception:
            logger.warning("Failed to invalidate snapshot cache", exc_info=True)
