from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union

from bucketfs.errors import InvalidVisibilityError


class Visibility(str, Enum):
    """Binary access classification of an object."""

    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def coerce(cls, value: Visibility | str) -> Visibility:
        if isinstance(value, Visibility):
            return value
        text = str(value or "").strip().lower()
        try:
            return cls(text)
        except ValueError as exc:
            raise InvalidVisibilityError(
                f"Invalid visibility provided: expected public or private, got {value!r}"
            ) from exc


@dataclass(frozen=True)
class ObjectRecord:
    """Backend view of one stored object."""

    key: str
    size: int = 0
    content_type: str | None = None
    last_modified: datetime | None = None

    @property
    def is_directory(self) -> bool:
        return self.key.endswith("/")


@dataclass(frozen=True)
class FileAttributes:
    path: str
    file_size: int | None = None
    visibility: Visibility | None = None
    last_modified: int | None = None
    mime_type: str | None = None

    is_file = True
    is_dir = False


@dataclass(frozen=True)
class DirectoryAttributes:
    path: str
    visibility: Visibility | None = None
    last_modified: int | None = None

    is_file = False
    is_dir = True


StorageAttributes = Union[FileAttributes, DirectoryAttributes]


def to_timestamp(value: datetime | None) -> int | None:
    """Convert a backend update time to integer epoch seconds."""

    if value is None:
        return None
    return int(value.timestamp())
