from __future__ import annotations

from collections.abc import Iterator
from typing import BinaryIO, Protocol, Union

from bucketfs.domain.attributes import ObjectRecord

Content = Union[bytes, BinaryIO]

#: Grantee meaning "everyone", including anonymous callers.
ALL_USERS = "http://acs.amazonaws.com/groups/global/AllUsers"
#: Permission that lets a grantee read object data.
READ = "READ"

#: Canned ACL presets applied on upload.
ACL_PUBLIC_READ = "public-read"
ACL_PRIVATE = "private"


class ObjectStore(Protocol):
    """Key-based access to a single bucket of a flat object store.

    Keys are physical keys (already prefixed). A key ending in ``/`` is an ordinary
    object as far as the store is concerned. Methods that address one object raise
    ``ObjectNotFoundError`` when it does not exist; other backend faults propagate
    unchanged.
    """

    bucket: str

    def object_exists(self, key: str) -> bool:
        """Return True when an object is stored at exactly ``key``."""

    def upload_object(
        self,
        key: str,
        content: Content,
        *,
        acl: str | None = None,
        content_type: str | None = None,
    ) -> None:
        """Create or overwrite ``key``. File objects are read incrementally."""

    def download_object(self, key: str) -> bytes:
        """Read the whole object."""

    def open_object(self, key: str) -> BinaryIO:
        """Return a readable handle over the object without buffering it."""

    def delete_object(self, key: str) -> None:
        """Delete ``key``; deleting an absent key is not an error."""

    def copy_object(self, source_key: str, dest_key: str, *, dest_bucket: str | None = None) -> None:
        """Server-side copy. ``dest_bucket`` defaults to this store's bucket."""

    def list_objects(self, prefix: str) -> Iterator[ObjectRecord]:
        """Yield records for every key starting with ``prefix`` (string prefix match)."""

    def get_acl(self, key: str, entity: str) -> str | None:
        """Return the permission granted to ``entity``, or None when it has no grant."""

    def add_acl_grant(self, key: str, entity: str, role: str) -> None:
        """Grant ``role`` to ``entity`` on ``key``."""

    def remove_acl_grant(self, key: str, entity: str) -> None:
        """Drop every grant held by ``entity``; no-op when there is none."""

    def reload_metadata(self, key: str) -> ObjectRecord:
        """Fetch current metadata for ``key``."""
