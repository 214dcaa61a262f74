"""Stable public imports for `bucketfs`.

Lower-level utilities should be imported from their submodules explicitly.
"""

from bucketfs.adapter import BucketAdapter
from bucketfs.config import AdapterConfig, load_config_file
from bucketfs.domain import (
    DirectoryAttributes,
    FileAttributes,
    ObjectRecord,
    StorageAttributes,
    Visibility,
)
from bucketfs.errors import (
    BucketFsError,
    ConfigurationError,
    CopyError,
    DeleteError,
    DirectoryCreateError,
    DirectoryDeleteError,
    FilesystemOperationError,
    InvalidVisibilityError,
    ListError,
    MetadataRetrievalError,
    MoveError,
    ObjectNotFoundError,
    ReadError,
    VisibilityError,
    WriteError,
)
from bucketfs.filesystem import FilesystemAdapter
from bucketfs.io import PathPrefixer, PublicUrlBuilder
from bucketfs.store import Boto3ObjectStore, ObjectStore

__all__ = [
    "AdapterConfig",
    "Boto3ObjectStore",
    "BucketAdapter",
    "BucketFsError",
    "ConfigurationError",
    "CopyError",
    "DeleteError",
    "DirectoryAttributes",
    "DirectoryCreateError",
    "DirectoryDeleteError",
    "FileAttributes",
    "FilesystemAdapter",
    "FilesystemOperationError",
    "InvalidVisibilityError",
    "ListError",
    "MetadataRetrievalError",
    "MoveError",
    "ObjectNotFoundError",
    "ObjectRecord",
    "ObjectStore",
    "PathPrefixer",
    "PublicUrlBuilder",
    "ReadError",
    "StorageAttributes",
    "Visibility",
    "VisibilityError",
    "WriteError",
    "load_config_file",
]
