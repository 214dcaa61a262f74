"""Filesystem verbs on top of a flat, prefix-scoped object store bucket.

Directories are emulated with zero-byte placeholder objects whose key ends in ``/``.
A root prefix lets several logical filesystems share one bucket: every key the
adapter touches starts with it, and every path it returns has it stripped.

Multi-call verbs (delete, delete_directory, copy, move) are not transactional. In
particular ``move`` is copy-then-delete: if the delete fails the object exists at
both locations and ``MoveError`` is raised.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any, BinaryIO

from bucketfs.config import AdapterConfig
from bucketfs.domain.attributes import (
    DirectoryAttributes,
    FileAttributes,
    ObjectRecord,
    StorageAttributes,
    Visibility,
    to_timestamp,
)
from bucketfs.errors import (
    CopyError,
    DeleteError,
    DirectoryCreateError,
    DirectoryDeleteError,
    ListError,
    MetadataRetrievalError,
    MoveError,
    ObjectNotFoundError,
    ReadError,
    VisibilityError,
    WriteError,
)
from bucketfs.io.mime import detect_mime_type
from bucketfs.io.paths import SEPARATOR, PathPrefixer
from bucketfs.io.urls import PublicUrlBuilder, build_base_url
from bucketfs.observability import log_event
from bucketfs.store.boto3_store import Boto3ObjectStore
from bucketfs.store.object_store import (
    ACL_PRIVATE,
    ACL_PUBLIC_READ,
    ALL_USERS,
    READ,
    Content,
    ObjectStore,
)

logger = logging.getLogger(__name__)

_ROOT_HAS_NO_PLACEHOLDER = "The bucket root has no directory placeholder."


def _is_nested(relative_key: str) -> bool:
    """True when ``relative_key`` has a separator anywhere but its last character."""

    index = relative_key.find(SEPARATOR)
    return index != -1 and index != len(relative_key) - 1


class BucketAdapter:
    """Filesystem adapter for one bucket, optionally scoped under a root prefix."""

    def __init__(
        self,
        store: ObjectStore,
        *,
        prefix: str | None = None,
        url: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        self._store = store
        self._prefixer = PathPrefixer(prefix or "")
        if url is not None:
            self._base_url = url
        else:
            self._base_url = build_base_url(
                bucket=store.bucket, prefix=prefix, endpoint_url=endpoint_url
            )
        self._url_builder = PublicUrlBuilder(url=self._base_url)

    @classmethod
    def from_config(
        cls,
        config: AdapterConfig | Mapping[str, Any],
        *,
        client: Any | None = None,
        store: ObjectStore | None = None,
    ) -> BucketAdapter:
        """Build an adapter from config; a boto3 store is created unless one is given."""

        if not isinstance(config, AdapterConfig):
            config = AdapterConfig.from_mapping(config)
        if store is None:
            store = Boto3ObjectStore(config.bucket, client=client, **config.client_options())
        return cls(
            store,
            prefix=config.prefix,
            url=config.url,
            endpoint_url=config.endpoint_url,
        )

    @property
    def store(self) -> ObjectStore:
        return self._store

    @property
    def prefixer(self) -> PathPrefixer:
        return self._prefixer

    @property
    def base_url(self) -> str:
        return self._base_url

    # -- writing -----------------------------------------------------------

    def write(
        self,
        path: str,
        contents: bytes | str,
        *,
        visibility: Visibility | str | None = None,
        mime_type: str | None = None,
    ) -> None:
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        self._write_object(path, contents, visibility=visibility, mime_type=mime_type)

    def write_stream(
        self,
        path: str,
        stream: BinaryIO,
        *,
        visibility: Visibility | str | None = None,
        mime_type: str | None = None,
    ) -> None:
        self._write_object(path, stream, visibility=visibility, mime_type=mime_type)

    def _write_object(
        self,
        path: str,
        content: Content,
        *,
        visibility: Visibility | str | None,
        mime_type: str | None,
    ) -> None:
        key = self._prefixer.prefix_path(path)
        acl = self._acl_preset(visibility)
        content_type = mime_type or detect_mime_type(path)
        try:
            self._store.upload_object(key, content, acl=acl, content_type=content_type)
        except Exception as exc:  # noqa: BLE001
            raise WriteError(path, str(exc)) from exc
        log_event(logger, "fs.write", path=path, key=key, acl=acl, content_type=content_type)

    @staticmethod
    def _acl_preset(visibility: Visibility | str | None) -> str:
        if visibility is not None and Visibility.coerce(visibility) is Visibility.PUBLIC:
            return ACL_PUBLIC_READ
        return ACL_PRIVATE

    # -- reading -----------------------------------------------------------

    def read(self, path: str) -> bytes:
        key = self._prefixer.prefix_path(path)
        try:
            return self._store.download_object(key)
        except ObjectNotFoundError as exc:
            raise ReadError(path, "Object does not exist.") from exc
        except Exception as exc:  # noqa: BLE001
            raise ReadError(path, str(exc)) from exc

    def read_stream(self, path: str) -> BinaryIO:
        key = self._prefixer.prefix_path(path)
        try:
            return self._store.open_object(key)
        except ObjectNotFoundError as exc:
            raise ReadError(path, "Object does not exist.") from exc
        except Exception as exc:  # noqa: BLE001
            raise ReadError(path, str(exc)) from exc

    def file_exists(self, path: str) -> bool:
        """Probe ``path`` as a file and as a directory placeholder; never raises."""

        key = self._prefixer.prefix_path(path)
        try:
            if self._store.object_exists(key):
                return True
            if key.endswith(SEPARATOR):
                return False
            # Facades usually strip trailing slashes, so look for a placeholder too.
            return self._store.object_exists(key + SEPARATOR)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger, "fs.file_exists", level=logging.WARNING, path=path, key=key, error=exc
            )
            return False

    def list_contents(self, path: str, recursive: bool = False) -> Iterator[StorageAttributes]:
        """Lazily yield entries under ``path``.

        Non-recursive listings drop keys nested below a direct child; a nested file
        only shows up through its directory when that directory's placeholder exists.
        The placeholder of the listed directory itself is never yielded.
        """

        directory = self._prefixer.prefix_directory_path(path)
        try:
            for record in self._store.list_objects(directory):
                relative = record.key[len(directory) :]
                if not relative:
                    continue
                if not recursive and _is_nested(relative):
                    continue
                yield self._to_attributes(record)
        except Exception as exc:  # noqa: BLE001
            raise ListError(path, str(exc)) from exc

    # -- deleting ----------------------------------------------------------

    def delete(self, path: str) -> None:
        """Delete a file. Deleting an absent file succeeds."""

        key = self._prefixer.prefix_path(path)
        try:
            if not self._store.object_exists(key):
                log_event(logger, "fs.delete", path=path, key=key, status="absent")
                return
            self._store.delete_object(key)
            still_present = self._store.object_exists(key)
        except Exception as exc:  # noqa: BLE001
            raise DeleteError(path, str(exc)) from exc

        if still_present:
            raise DeleteError(path, "Object still exists after delete.")
        log_event(logger, "fs.delete", path=path, key=key, status="deleted")

    def delete_directory(self, path: str) -> None:
        """Delete the placeholder of ``path``; objects nested below it are left in place."""

        key = self._prefixer.prefix_directory_path(path)
        if not key:
            raise DirectoryDeleteError(path, _ROOT_HAS_NO_PLACEHOLDER)
        try:
            exists = self._store.object_exists(key)
        except Exception as exc:  # noqa: BLE001
            raise DirectoryDeleteError(path, str(exc)) from exc
        if not exists:
            raise DirectoryDeleteError(path, "Directory does not exist.")

        try:
            self._store.delete_object(key)
            still_present = self._store.object_exists(key)
        except Exception as exc:  # noqa: BLE001
            raise DirectoryDeleteError(path, str(exc)) from exc
        if still_present:
            raise DirectoryDeleteError(path, "Directory placeholder still exists after delete.")
        log_event(logger, "fs.delete_directory", path=path, key=key)

    # -- directories -------------------------------------------------------

    def create_directory(self, path: str, *, visibility: Visibility | str | None = None) -> None:
        key = self._prefixer.prefix_directory_path(path)
        if not key:
            raise DirectoryCreateError(path, _ROOT_HAS_NO_PLACEHOLDER)
        acl = self._acl_preset(visibility)
        try:
            self._store.upload_object(key, b"", acl=acl)
            created = self._store.object_exists(key)
        except Exception as exc:  # noqa: BLE001
            raise DirectoryCreateError(path, str(exc)) from exc
        if not created:
            raise DirectoryCreateError(path, "Directory placeholder missing after upload.")
        log_event(logger, "fs.create_directory", path=path, key=key, acl=acl)

    # -- copy / move -------------------------------------------------------

    def copy(
        self,
        source: str,
        destination: str,
        *,
        visibility: Visibility | str | None = None,
    ) -> None:
        """Server-side copy, then apply the source's visibility (or ``visibility``)."""

        source_key = self._prefixer.prefix_path(source)
        destination_key = self._prefixer.prefix_path(destination)

        if visibility is None:
            try:
                level = self.visibility(source).visibility
            except MetadataRetrievalError as exc:
                raise CopyError(source, destination, exc.reason) from exc
        else:
            level = Visibility.coerce(visibility)

        # S3 refuses to copy an object onto itself; only the visibility can change.
        if source_key != destination_key:
            try:
                self._store.copy_object(source_key, destination_key)
            except ObjectNotFoundError as exc:
                raise CopyError(source, destination, "Source does not exist.") from exc
            except Exception as exc:  # noqa: BLE001
                raise CopyError(source, destination, str(exc)) from exc

        try:
            self.set_visibility(destination, level)
        except VisibilityError as exc:
            raise CopyError(source, destination, exc.reason) from exc
        log_event(
            logger,
            "fs.copy",
            source=source_key,
            destination=destination_key,
            visibility=level.value,
        )

    def move(
        self,
        source: str,
        destination: str,
        *,
        visibility: Visibility | str | None = None,
    ) -> None:
        """Copy ``source`` to ``destination`` and delete the source. Not atomic."""

        source_key = self._prefixer.prefix_path(source)
        try:
            exists = self._store.object_exists(source_key)
        except Exception as exc:  # noqa: BLE001
            raise MoveError(source, destination, str(exc)) from exc
        if not exists:
            raise MoveError(source, destination, "Source does not exist.")

        if source_key == self._prefixer.prefix_path(destination):
            if visibility is not None:
                try:
                    self.set_visibility(source, visibility)
                except VisibilityError as exc:
                    raise MoveError(source, destination, exc.reason) from exc
            log_event(
                logger, "fs.move", source=source, destination=destination, status="unchanged"
            )
            return

        try:
            self.copy(source, destination, visibility=visibility)
        except CopyError as exc:
            raise MoveError(source, destination, exc.reason) from exc

        try:
            self.delete(source)
        except DeleteError as exc:
            raise MoveError(
                source, destination, f"Copied, but the source was not removed: {exc.reason}"
            ) from exc
        log_event(logger, "fs.move", source=source, destination=destination)

    # -- visibility --------------------------------------------------------

    def visibility(self, path: str) -> FileAttributes:
        key = self._prefixer.prefix_path(path)
        try:
            exists = self._store.object_exists(key)
        except Exception as exc:  # noqa: BLE001
            raise MetadataRetrievalError(path, "visibility", str(exc)) from exc
        if not exists:
            raise MetadataRetrievalError(path, "visibility", "Object does not exist.")

        try:
            role = self._store.get_acl(key, ALL_USERS)
        except ObjectNotFoundError:
            role = None
        except Exception as exc:  # noqa: BLE001
            raise MetadataRetrievalError(path, "visibility", str(exc)) from exc

        level = Visibility.PUBLIC if role == READ else Visibility.PRIVATE
        return FileAttributes(path=self._prefixer.strip_prefix(key), visibility=level)

    def set_visibility(self, path: str, visibility: Visibility | str) -> None:
        level = Visibility.coerce(visibility)
        key = self._prefixer.prefix_path(path)
        try:
            exists = self._store.object_exists(key)
        except Exception as exc:  # noqa: BLE001
            raise VisibilityError(path, str(exc)) from exc
        if not exists:
            raise VisibilityError(path, "Object does not exist.")

        try:
            if level is Visibility.PUBLIC:
                self._store.add_acl_grant(key, ALL_USERS, READ)
            else:
                self._store.remove_acl_grant(key, ALL_USERS)
            self._store.reload_metadata(key)
        except Exception as exc:  # noqa: BLE001
            raise VisibilityError(path, str(exc)) from exc
        log_event(logger, "fs.set_visibility", path=path, key=key, visibility=level.value)

    # -- metadata ----------------------------------------------------------

    def _fetch_record(self, path: str, attribute: str) -> ObjectRecord:
        key = self._prefixer.prefix_path(path)
        try:
            return self._store.reload_metadata(key)
        except ObjectNotFoundError as exc:
            raise MetadataRetrievalError(path, attribute, "Object does not exist.") from exc
        except Exception as exc:  # noqa: BLE001
            raise MetadataRetrievalError(path, attribute, str(exc)) from exc

    def file_size(self, path: str) -> FileAttributes:
        record = self._fetch_record(path, "file_size")
        if record.is_directory:
            raise MetadataRetrievalError(path, "file_size", "Path is a directory.")
        return FileAttributes(path=self._prefixer.strip_prefix(record.key), file_size=record.size)

    def mime_type(self, path: str) -> FileAttributes:
        record = self._fetch_record(path, "mime_type")
        if record.is_directory:
            raise MetadataRetrievalError(path, "mime_type", "Path is a directory.")
        mime_type = record.content_type or detect_mime_type(path)
        if not mime_type:
            raise MetadataRetrievalError(path, "mime_type", "Unknown content type.")
        return FileAttributes(path=self._prefixer.strip_prefix(record.key), mime_type=mime_type)

    def last_modified(self, path: str) -> StorageAttributes:
        record = self._fetch_record(path, "last_modified")
        timestamp = to_timestamp(record.last_modified)
        if timestamp is None:
            raise MetadataRetrievalError(path, "last_modified", "Backend reported no update time.")
        if record.is_directory:
            return DirectoryAttributes(
                path=self._prefixer.strip_directory_prefix(record.key), last_modified=timestamp
            )
        return FileAttributes(path=self._prefixer.strip_prefix(record.key), last_modified=timestamp)

    def get_metadata(self, path: str) -> StorageAttributes:
        """Full attributes for a file, or for a directory placeholder when no file matches."""

        key = self._prefixer.prefix_path(path)
        try:
            record = self._store.reload_metadata(key)
        except ObjectNotFoundError as exc:
            if key.endswith(SEPARATOR):
                raise MetadataRetrievalError(path, "metadata", "Object does not exist.") from exc
            record = self._fetch_record(path.rstrip(SEPARATOR) + SEPARATOR, "metadata")
        except Exception as exc:  # noqa: BLE001
            raise MetadataRetrievalError(path, "metadata", str(exc)) from exc
        return self._to_attributes(record)

    def _to_attributes(self, record: ObjectRecord) -> StorageAttributes:
        last_modified = to_timestamp(record.last_modified)
        if record.is_directory:
            return DirectoryAttributes(
                path=self._prefixer.strip_directory_prefix(record.key),
                last_modified=last_modified,
            )
        return FileAttributes(
            path=self._prefixer.strip_prefix(record.key),
            file_size=record.size,
            last_modified=last_modified,
            mime_type=record.content_type,
        )

    # -- urls --------------------------------------------------------------

    def get_url(self, path: str) -> str:
        """Public URL of ``path``. The base URL already carries the prefix, if any."""

        return self._url_builder.build(path)
