"""Integration fixtures: a real S3/MinIO bucket behind the adapter.

Enabled with ``BUCKETFS_INTEGRATION=1``; connection settings come from ``S3_*`` env vars.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator

import boto3
import pytest
from botocore.config import Config
from botocore.exceptions import ClientError

from bucketfs.adapter import BucketAdapter
from bucketfs.store.boto3_store import Boto3ObjectStore


@pytest.fixture(scope="session")
def s3_client():
    if os.getenv("BUCKETFS_INTEGRATION") != "1":
        pytest.skip("set BUCKETFS_INTEGRATION=1 to run against a real bucket")

    # Fail fast when the endpoint is unreachable instead of retrying for minutes.
    client_config = Config(
        connect_timeout=float(os.getenv("S3_CONNECT_TIMEOUT", "2")),
        read_timeout=float(os.getenv("S3_READ_TIMEOUT", "5")),
        retries={"max_attempts": int(os.getenv("S3_MAX_ATTEMPTS", "2"))},
        s3={"addressing_style": os.getenv("S3_URL_STYLE", "path")},
    )
    return boto3.client(
        "s3",
        endpoint_url=os.getenv("S3_ENDPOINT_URL", "http://localhost:9000"),
        aws_access_key_id=os.getenv("S3_ACCESS_KEY_ID", "minioadmin"),
        aws_secret_access_key=os.getenv("S3_SECRET_ACCESS_KEY", "minioadmin"),
        region_name=os.getenv("S3_REGION", "us-east-1"),
        config=client_config,
    )


@pytest.fixture(scope="session")
def test_bucket_name(s3_client) -> str:
    bucket = os.getenv("S3_BUCKET_NAME", "bucketfs-test")
    try:
        s3_client.head_bucket(Bucket=bucket)
    except ClientError as error:
        code = str(error.response.get("Error", {}).get("Code", ""))
        if code in {"404", "NoSuchBucket"}:
            s3_client.create_bucket(Bucket=bucket)
        else:
            raise
    return bucket


@pytest.fixture
def run_prefix() -> str:
    return f"_integration/{uuid.uuid4().hex}"


@pytest.fixture
def s3_adapter(s3_client, test_bucket_name: str, run_prefix: str) -> Generator[BucketAdapter, None, None]:
    adapter = BucketAdapter(Boto3ObjectStore(test_bucket_name, client=s3_client), prefix=run_prefix)
    yield adapter

    paginator = s3_client.get_paginator("list_objects_v2")
    for page in paginator.paginate(Bucket=test_bucket_name, Prefix=f"{run_prefix}/"):
        contents = page.get("Contents", [])
        if contents:
            s3_client.delete_objects(
                Bucket=test_bucket_name,
                Delete={"Objects": [{"Key": obj["Key"]} for obj in contents]},
            )
