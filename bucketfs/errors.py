from __future__ import annotations


class BucketFsError(Exception):
    """Base error for bucketfs."""


class ConfigurationError(BucketFsError, ValueError):
    """Raised when adapter configuration is missing or invalid."""


class ObjectNotFoundError(BucketFsError):
    """Raised by object stores when a key does not exist."""

    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}")
        self.key = key


class InvalidVisibilityError(BucketFsError, ValueError):
    """Raised when a visibility value is neither public nor private."""


class FilesystemOperationError(BucketFsError):
    """Base for failures of a single filesystem verb at a logical location."""

    operation = "operate on"

    def __init__(self, location: str, reason: str = ""):
        self.location = location
        self.reason = reason
        message = f"Unable to {self.operation} at location: {location}."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class WriteError(FilesystemOperationError):
    operation = "write file"


class ReadError(FilesystemOperationError):
    operation = "read file"


class DeleteError(FilesystemOperationError):
    operation = "delete file"


class DirectoryDeleteError(FilesystemOperationError):
    operation = "delete directory"


class DirectoryCreateError(FilesystemOperationError):
    operation = "create directory"


class ListError(FilesystemOperationError):
    operation = "list contents"


class VisibilityError(FilesystemOperationError):
    operation = "set visibility"


class TransferError(FilesystemOperationError):
    """Failure of a verb that has both a source and a destination."""

    def __init__(self, source: str, destination: str, reason: str = ""):
        self.source = source
        self.destination = destination
        super().__init__(f"{source} -> {destination}", reason)


class CopyError(TransferError):
    operation = "copy file"


class MoveError(TransferError):
    operation = "move file"


class MetadataRetrievalError(FilesystemOperationError):
    """Raised when one metadata attribute cannot be retrieved."""

    def __init__(self, location: str, attribute: str, reason: str = ""):
        self.attribute = attribute
        self.operation = f"retrieve the {attribute}"
        super().__init__(location, reason)
