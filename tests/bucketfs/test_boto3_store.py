from __future__ import annotations

import io
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from bucketfs.adapter import BucketAdapter
from bucketfs.domain.attributes import ObjectRecord, Visibility
from bucketfs.errors import MetadataRetrievalError, ObjectNotFoundError, ReadError
from bucketfs.store.boto3_store import Boto3ObjectStore, build_s3_client
from bucketfs.store.object_store import ALL_USERS

OWNER = {"ID": "owner-id", "DisplayName": "owner"}
OWNER_GRANT = {"Grantee": {"Type": "CanonicalUser", "ID": "owner-id"}, "Permission": "FULL_CONTROL"}
PUBLIC_GRANT = {"Grantee": {"Type": "Group", "URI": ALL_USERS}, "Permission": "READ"}


def _client_error(code: str, operation: str = "HeadObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def s3_store(client: MagicMock) -> Boto3ObjectStore:
    return Boto3ObjectStore("bucket", client=client)


def test_object_exists_maps_404_to_false(s3_store: Boto3ObjectStore, client: MagicMock) -> None:
    client.head_object.side_effect = _client_error("404")

    assert s3_store.object_exists("a.txt") is False
    client.head_object.assert_called_once_with(Bucket="bucket", Key="a.txt")


def test_object_exists_propagates_other_errors(s3_store, client: MagicMock) -> None:
    client.head_object.side_effect = _client_error("403")

    with pytest.raises(ClientError):
        s3_store.object_exists("a.txt")


def test_upload_bytes_uses_put_object(s3_store, client: MagicMock) -> None:
    s3_store.upload_object("a.txt", b"hello", acl="public-read", content_type="text/plain")

    client.put_object.assert_called_once_with(
        Bucket="bucket", Key="a.txt", Body=b"hello", ACL="public-read", ContentType="text/plain"
    )


def test_upload_stream_uses_upload_fileobj(s3_store, client: MagicMock) -> None:
    stream = io.BytesIO(b"hello")

    s3_store.upload_object("a.txt", stream, acl="private")

    client.upload_fileobj.assert_called_once_with(
        stream, "bucket", "a.txt", ExtraArgs={"ACL": "private"}
    )
    client.put_object.assert_not_called()


def test_download_missing_raises_object_not_found(s3_store, client: MagicMock) -> None:
    client.get_object.side_effect = _client_error("NoSuchKey", "GetObject")

    with pytest.raises(ObjectNotFoundError):
        s3_store.download_object("a.txt")


def test_download_reads_body(s3_store, client: MagicMock) -> None:
    client.get_object.return_value = {"Body": io.BytesIO(b"hello")}

    assert s3_store.download_object("a.txt") == b"hello"


def test_copy_object_same_bucket(s3_store, client: MagicMock) -> None:
    s3_store.copy_object("src.txt", "dst.txt")

    client.copy_object.assert_called_once_with(
        Bucket="bucket", Key="dst.txt", CopySource={"Bucket": "bucket", "Key": "src.txt"}
    )


def test_list_objects_paginates_lazily(s3_store, client: MagicMock) -> None:
    updated = datetime(2024, 1, 1, tzinfo=timezone.utc)
    paginator = MagicMock()
    paginator.paginate.return_value = [
        {"Contents": [{"Key": "d/", "Size": 0, "LastModified": updated}]},
        {"Contents": [{"Key": "d/a.txt", "Size": 5, "LastModified": updated}]},
        {},
    ]
    client.get_paginator.return_value = paginator

    records = s3_store.list_objects("d/")
    client.get_paginator.assert_not_called()

    assert list(records) == [
        ObjectRecord(key="d/", size=0, content_type=None, last_modified=updated),
        ObjectRecord(key="d/a.txt", size=5, content_type=None, last_modified=updated),
    ]
    client.get_paginator.assert_called_once_with("list_objects_v2")
    paginator.paginate.assert_called_once_with(Bucket="bucket", Prefix="d/")


def test_get_acl_finds_all_users_grant(s3_store, client: MagicMock) -> None:
    client.get_object_acl.return_value = {"Owner": OWNER, "Grants": [OWNER_GRANT, PUBLIC_GRANT]}

    assert s3_store.get_acl("a.txt", ALL_USERS) == "READ"


def test_get_acl_without_grant(s3_store, client: MagicMock) -> None:
    client.get_object_acl.return_value = {"Owner": OWNER, "Grants": [OWNER_GRANT]}

    assert s3_store.get_acl("a.txt", ALL_USERS) is None


def test_add_acl_grant_appends_group_grant(s3_store, client: MagicMock) -> None:
    client.get_object_acl.return_value = {"Owner": OWNER, "Grants": [OWNER_GRANT]}

    s3_store.add_acl_grant("a.txt", ALL_USERS, "READ")

    client.put_object_acl.assert_called_once_with(
        Bucket="bucket",
        Key="a.txt",
        AccessControlPolicy={"Grants": [OWNER_GRANT, PUBLIC_GRANT], "Owner": OWNER},
    )


def test_add_acl_grant_is_noop_when_present(s3_store, client: MagicMock) -> None:
    client.get_object_acl.return_value = {"Owner": OWNER, "Grants": [OWNER_GRANT, PUBLIC_GRANT]}

    s3_store.add_acl_grant("a.txt", ALL_USERS, "READ")

    client.put_object_acl.assert_not_called()


def test_remove_acl_grant(s3_store, client: MagicMock) -> None:
    client.get_object_acl.return_value = {"Owner": OWNER, "Grants": [OWNER_GRANT, PUBLIC_GRANT]}

    s3_store.remove_acl_grant("a.txt", ALL_USERS)

    client.put_object_acl.assert_called_once_with(
        Bucket="bucket",
        Key="a.txt",
        AccessControlPolicy={"Grants": [OWNER_GRANT], "Owner": OWNER},
    )


def test_remove_absent_acl_grant_is_noop(s3_store, client: MagicMock) -> None:
    client.get_object_acl.return_value = {"Owner": OWNER, "Grants": [OWNER_GRANT]}

    s3_store.remove_acl_grant("a.txt", ALL_USERS)

    client.put_object_acl.assert_not_called()


def test_reload_metadata_from_head_object(s3_store, client: MagicMock) -> None:
    updated = datetime(2024, 1, 1, tzinfo=timezone.utc)
    client.head_object.return_value = {
        "ContentLength": 5,
        "ContentType": "text/plain",
        "LastModified": updated,
    }

    assert s3_store.reload_metadata("a.txt") == ObjectRecord(
        key="a.txt", size=5, content_type="text/plain", last_modified=updated
    )


def test_adapter_wraps_client_errors(client: MagicMock) -> None:
    client.get_object.side_effect = _client_error("AccessDenied", "GetObject")
    client.head_object.side_effect = _client_error("NotFound")
    adapter = BucketAdapter(Boto3ObjectStore("bucket", client=client), prefix="tenant")

    with pytest.raises(ReadError) as read_error:
        adapter.read("a.txt")
    with pytest.raises(MetadataRetrievalError):
        adapter.file_size("a.txt")

    assert isinstance(read_error.value.__cause__, ClientError)
    client.get_object.assert_called_once_with(Bucket="bucket", Key="tenant/a.txt")


def test_adapter_visibility_over_s3_acl(client: MagicMock) -> None:
    client.head_object.return_value = {"ContentLength": 1}
    client.get_object_acl.return_value = {"Owner": OWNER, "Grants": [OWNER_GRANT, PUBLIC_GRANT]}
    adapter = BucketAdapter(Boto3ObjectStore("bucket", client=client))

    assert adapter.visibility("a.txt").visibility is Visibility.PUBLIC

    adapter.set_visibility("a.txt", Visibility.PRIVATE)

    client.put_object_acl.assert_called_once_with(
        Bucket="bucket",
        Key="a.txt",
        AccessControlPolicy={"Grants": [OWNER_GRANT], "Owner": OWNER},
    )


@pytest.mark.parametrize(
    ("endpoint_url", "expected"),
    [(None, True), ("https://s3.example.com", True), ("http://minio:9000", False)],
)
def test_build_s3_client_infers_ssl_from_endpoint(monkeypatch, endpoint_url, expected) -> None:
    import boto3

    captured: dict = {}

    def _fake_client(service_name, **kwargs):
        captured.update(kwargs, service_name=service_name)
        return MagicMock()

    monkeypatch.setattr(boto3, "client", _fake_client)

    build_s3_client(endpoint_url=endpoint_url, url_style="virtual")

    assert captured["service_name"] == "s3"
    assert captured["use_ssl"] is expected
    assert captured["config"].s3 == {"addressing_style": "virtual"}


def test_build_s3_client_keeps_explicit_ssl_flag(monkeypatch) -> None:
    import boto3

    captured: dict = {}
    monkeypatch.setattr(boto3, "client", lambda service_name, **kwargs: captured.update(kwargs))

    build_s3_client(endpoint_url="https://minio:9000", use_ssl=False)

    assert captured["use_ssl"] is False
