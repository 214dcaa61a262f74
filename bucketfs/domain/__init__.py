"""Value types shared by stores and the adapter."""

from bucketfs.domain.attributes import (
    DirectoryAttributes,
    FileAttributes,
    ObjectRecord,
    StorageAttributes,
    Visibility,
    to_timestamp,
)

__all__ = [
    "DirectoryAttributes",
    "FileAttributes",
    "ObjectRecord",
    "StorageAttributes",
    "Visibility",
    "to_timestamp",
]
