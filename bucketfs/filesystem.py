from __future__ import annotations

from collections.abc import Iterator
from typing import BinaryIO, Protocol, runtime_checkable

from bucketfs.domain.attributes import FileAttributes, StorageAttributes, Visibility


@runtime_checkable
class FilesystemAdapter(Protocol):
    """Verb set a filesystem facade expects from a storage backend.

    All paths are logical paths. Failures surface as ``bucketfs.errors`` types.
    """

    def file_exists(self, path: str) -> bool:
        ...

    def write(
        self,
        path: str,
        contents: bytes | str,
        *,
        visibility: Visibility | str | None = None,
        mime_type: str | None = None,
    ) -> None:
        ...

    def write_stream(
        self,
        path: str,
        stream: BinaryIO,
        *,
        visibility: Visibility | str | None = None,
        mime_type: str | None = None,
    ) -> None:
        ...

    def read(self, path: str) -> bytes:
        ...

    def read_stream(self, path: str) -> BinaryIO:
        ...

    def delete(self, path: str) -> None:
        ...

    def delete_directory(self, path: str) -> None:
        ...

    def create_directory(self, path: str, *, visibility: Visibility | str | None = None) -> None:
        ...

    def set_visibility(self, path: str, visibility: Visibility | str) -> None:
        ...

    def visibility(self, path: str) -> FileAttributes:
        ...

    def mime_type(self, path: str) -> FileAttributes:
        ...

    def last_modified(self, path: str) -> StorageAttributes:
        ...

    def file_size(self, path: str) -> FileAttributes:
        ...

    def get_metadata(self, path: str) -> StorageAttributes:
        ...

    def get_url(self, path: str) -> str:
        ...

    def list_contents(self, path: str, recursive: bool = False) -> Iterator[StorageAttributes]:
        ...

    def move(
        self, source: str, destination: str, *, visibility: Visibility | str | None = None
    ) -> None:
        ...

    def copy(
        self, source: str, destination: str, *, visibility: Visibility | str | None = None
    ) -> None:
        ...
