from __future__ import annotations

import os
import urllib.request
from uuid import uuid4

import pytest

from src.adapters.aws import dynamodb_client, s3_client

# (hash key, range key) per collection table; all keys are numeric.
_TABLE_KEYS = {
    "stops": ("id", None),
    "routes": ("id", None),
    "route-stops": ("route_id", "stop_id"),
    "buses": ("id", None),
}


def _localstack_healthy(endpoint_url: str) -> bool:
    url = endpoint_url.rstrip("/") + "/_localstack/health"
    try:
        with urllib.request.urlopen(url, timeout=1.5) as resp:  # nosec B310
            return 200 <= resp.status < 300
    except Exception:
        return False


@pytest.fixture(scope="session", autouse=True)
def localstack_env() -> None:
    """Point boto3 at LocalStack unless the environment says otherwise."""

    os.environ.setdefault("USE_LOCALSTACK", "true")
    os.environ.setdefault("ENDPOINT_URL", "http://localhost:4566")
    os.environ.setdefault(
        "LOCALSTACK_ENDPOINT_URL",
        os.environ.get("ENDPOINT_URL", "http://localhost:4566"),
    )
    os.environ.setdefault("AWS_REGION", "eu-west-1")

    # boto3 requires some credentials to be present, even for LocalStack.
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")


@pytest.fixture(scope="session")
def require_localstack(localstack_env: None) -> str:
    endpoint_url = os.environ.get(
        "ENDPOINT_URL",
        os.environ.get("LOCALSTACK_ENDPOINT_URL", "http://localhost:4566"),
    )
    if not _localstack_healthy(endpoint_url):
        msg = f"LocalStack not reachable at {endpoint_url}"

        # CI starts LocalStack, so a missing one there is a failure.
        if (
            os.getenv("CI")
            or os.getenv("GITHUB_ACTIONS")
            or os.getenv("REQUIRE_LOCALSTACK")
        ):
            pytest.fail(msg, pytrace=False)

        pytest.skip(f"{msg}; skipping integration tests")
    return endpoint_url


@pytest.fixture
def transit_tables(require_localstack: str):
    """Create the four collection tables under a fresh prefix; yield the prefix."""

    prefix = f"transit-test-{uuid4().hex[:8]}"
    ddb = dynamodb_client()
    names = []
    for collection, (hash_key, range_key) in _TABLE_KEYS.items():
        keys = [k for k in (hash_key, range_key) if k]
        name = f"{prefix}-{collection}"
        ddb.create_table(
            TableName=name,
            BillingMode="PAY_PER_REQUEST",
            AttributeDefinitions=[
                {"AttributeName": k, "AttributeType": "N"} for k in keys
            ],
            KeySchema=[
                {"AttributeName": k, "KeyType": kind}
                for k, kind in zip(keys, ("HASH", "RANGE"))
            ],
        )
        names.append(name)

    waiter = ddb.get_waiter("table_exists")
    for name in names:
        waiter.wait(TableName=name)

    yield prefix

    for name in names:
        ddb.delete_table(TableName=name)


@pytest.fixture
def cache_bucket(require_localstack: str) -> str:
    bucket = "transit-test-snapshots"
    s3 = s3_client()
    try:
        s3.create_bucket(
            Bucket=bucket,
            CreateBucketConfiguration={
                "LocationConstraint": os.environ.get("AWS_REGION", "eu-west-1")
            },
        )
    except s3.exceptions.BucketAlreadyOwnedByYou:
        pass
    return bucket
