from .s3_snapshot_cache import S3SnapshotCache

__all__ = ["S3SnapshotCache"]
