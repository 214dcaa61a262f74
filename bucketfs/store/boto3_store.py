from __future__ import annotations

from collections.abc import Iterator
from typing import Any, BinaryIO

from bucketfs.domain.attributes import ObjectRecord
from bucketfs.errors import ObjectNotFoundError
from bucketfs.store.object_store import READ, Content

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(exc: Exception) -> str:
    response = getattr(exc, "response", None) or {}
    error = response.get("Error") or {}
    return str(error.get("Code") or "")


def is_not_found(exc: Exception) -> bool:
    return _error_code(exc) in _NOT_FOUND_CODES


def _infer_use_ssl(endpoint_url: str | None) -> bool:
    """AWS endpoints are always TLS; a custom endpoint is TLS only when its scheme says so."""

    if not endpoint_url:
        return True
    return endpoint_url.lower().startswith("https:")


def build_s3_client(
    *,
    endpoint_url: str | None = None,
    access_key: str | None = None,
    secret_key: str | None = None,
    region: str = "us-east-1",
    use_ssl: bool | None = None,
    url_style: str = "path",
    session_token: str | None = None,
) -> Any:
    """Create the boto3 S3 client a ``Boto3ObjectStore`` talks to.

    Works against AWS or any S3-compatible endpoint (MinIO, localstack).
    """

    try:
        import boto3
        from botocore.config import Config
    except ModuleNotFoundError as exc:
        raise ModuleNotFoundError(
            "bucketfs needs boto3 to reach a real bucket; install it with `pip install boto3`."
        ) from exc

    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        region_name=region,
        use_ssl=_infer_use_ssl(endpoint_url) if use_ssl is None else use_ssl,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        aws_session_token=session_token,
        config=Config(s3={"addressing_style": url_style}),
    )


def _to_record(key: str, *, size: Any, content_type: Any, last_modified: Any) -> ObjectRecord:
    return ObjectRecord(
        key=key,
        size=int(size or 0),
        content_type=str(content_type) if content_type else None,
        last_modified=last_modified,
    )


class Boto3ObjectStore:
    """ObjectStore for one S3 bucket, backed by a boto3 client."""

    def __init__(self, bucket: str, client: Any | None = None, **client_options: Any) -> None:
        self.bucket = bucket
        self._client = client if client is not None else build_s3_client(**client_options)

    @property
    def client(self) -> Any:
        return self._client

    def object_exists(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=key)
        except Exception as exc:  # noqa: BLE001
            if is_not_found(exc):
                return False
            raise
        return True

    def upload_object(
        self,
        key: str,
        content: Content,
        *,
        acl: str | None = None,
        content_type: str | None = None,
    ) -> None:
        extra: dict[str, Any] = {}
        if acl:
            extra["ACL"] = acl
        if content_type:
            extra["ContentType"] = content_type

        if isinstance(content, (bytes, bytearray)):
            self._client.put_object(Bucket=self.bucket, Key=key, Body=bytes(content), **extra)
            return
        # Multipart-capable upload that reads the handle in chunks.
        self._client.upload_fileobj(content, self.bucket, key, ExtraArgs=extra or None)

    def _get_object(self, key: str) -> dict[str, Any]:
        try:
            return self._client.get_object(Bucket=self.bucket, Key=key)
        except Exception as exc:  # noqa: BLE001
            if is_not_found(exc):
                raise ObjectNotFoundError(key) from exc
            raise

    def download_object(self, key: str) -> bytes:
        return self._get_object(key)["Body"].read()

    def open_object(self, key: str) -> BinaryIO:
        return self._get_object(key)["Body"]

    def delete_object(self, key: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=key)

    def copy_object(self, source_key: str, dest_key: str, *, dest_bucket: str | None = None) -> None:
        try:
            self._client.copy_object(
                Bucket=dest_bucket or self.bucket,
                Key=dest_key,
                CopySource={"Bucket": self.bucket, "Key": source_key},
            )
        except Exception as exc:  # noqa: BLE001
            if is_not_found(exc):
                raise ObjectNotFoundError(source_key) from exc
            raise

    def list_objects(self, prefix: str) -> Iterator[ObjectRecord]:
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            for obj in page.get("Contents", []) or []:
                key = obj.get("Key")
                if not key:
                    continue
                # ListObjectsV2 does not report content types.
                yield _to_record(
                    key,
                    size=obj.get("Size"),
                    content_type=None,
                    last_modified=obj.get("LastModified"),
                )

    def _get_acl_policy(self, key: str) -> dict[str, Any]:
        try:
            response = self._client.get_object_acl(Bucket=self.bucket, Key=key)
        except Exception as exc:  # noqa: BLE001
            if is_not_found(exc):
                raise ObjectNotFoundError(key) from exc
            raise
        return {"Grants": list(response.get("Grants") or []), "Owner": response.get("Owner")}

    def _put_acl_policy(self, key: str, policy: dict[str, Any]) -> None:
        body: dict[str, Any] = {"Grants": policy["Grants"]}
        if policy.get("Owner"):
            body["Owner"] = policy["Owner"]
        self._client.put_object_acl(Bucket=self.bucket, Key=key, AccessControlPolicy=body)

    @staticmethod
    def _grantee_id(grant: dict[str, Any]) -> str | None:
        grantee = grant.get("Grantee") or {}
        return grantee.get("URI") or grantee.get("ID") or grantee.get("EmailAddress")

    def get_acl(self, key: str, entity: str) -> str | None:
        policy = self._get_acl_policy(key)
        permissions = [
            str(grant.get("Permission"))
            for grant in policy["Grants"]
            if self._grantee_id(grant) == entity
        ]
        if not permissions:
            return None
        if READ in permissions:
            return READ
        return permissions[0]

    def add_acl_grant(self, key: str, entity: str, role: str) -> None:
        policy = self._get_acl_policy(key)
        for grant in policy["Grants"]:
            if self._grantee_id(grant) == entity and grant.get("Permission") == role:
                return
        grantee_type = "Group" if entity.startswith("http") else "CanonicalUser"
        grantee_field = "URI" if grantee_type == "Group" else "ID"
        policy["Grants"].append(
            {"Grantee": {"Type": grantee_type, grantee_field: entity}, "Permission": role}
        )
        self._put_acl_policy(key, policy)

    def remove_acl_grant(self, key: str, entity: str) -> None:
        policy = self._get_acl_policy(key)
        kept = [grant for grant in policy["Grants"] if self._grantee_id(grant) != entity]
        if len(kept) == len(policy["Grants"]):
            return
        policy["Grants"] = kept
        self._put_acl_policy(key, policy)

    def reload_metadata(self, key: str) -> ObjectRecord:
        try:
            response = self._client.head_object(Bucket=self.bucket, Key=key)
        except Exception as exc:  # noqa: BLE001
            if is_not_found(exc):
                raise ObjectNotFoundError(key) from exc
            raise
        return _to_record(
            key,
            size=response.get("ContentLength"),
            content_type=response.get("ContentType"),
            last_modified=response.get("LastModified"),
        )
