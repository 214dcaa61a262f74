"""Object store abstractions and implementations."""

from bucketfs.store.boto3_store import Boto3ObjectStore, build_s3_client
from bucketfs.store.object_store import (
    ACL_PRIVATE,
    ACL_PUBLIC_READ,
    ALL_USERS,
    READ,
    ObjectStore,
)

__all__ = [
    "ACL_PRIVATE",
    "ACL_PUBLIC_READ",
    "ALL_USERS",
    "Boto3ObjectStore",
    "ObjectStore",
    "READ",
    "build_s3_client",
]
