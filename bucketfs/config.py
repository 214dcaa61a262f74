"""Adapter configuration (explicit fields, env-first helpers, YAML files)."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from bucketfs.errors import ConfigurationError
from bucketfs.observability import log_event

logger = logging.getLogger(__name__)

_PROJECT_KEYS = {"projectId", "project_id"}
_CREDENTIAL_FIELDS = {"access_key", "secret_key", "session_token"}

_ALIASES = {
    "endpointUrl": "endpoint_url",
    "accessKey": "access_key",
    "secretKey": "secret_key",
    "sessionToken": "session_token",
    "urlStyle": "url_style",
    "useSsl": "use_ssl",
}


@dataclass(frozen=True)
class AdapterConfig:
    """Configuration for an object-store backed filesystem adapter.

    Only ``bucket`` is required. ``prefix`` defaults to the bucket root and ``url``
    defaults to a base URL synthesized from the endpoint, bucket and prefix.
    Connection fields are only used when the adapter builds its own boto3 client.
    """

    bucket: str
    prefix: str = ""
    url: str | None = None
    endpoint_url: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    region: str = "us-east-1"
    use_ssl: bool | None = None
    url_style: str = "path"
    session_token: str | None = None

    def __post_init__(self) -> None:
        bucket = (self.bucket or "").strip() if isinstance(self.bucket, str) else ""
        if not bucket:
            raise ConfigurationError("AdapterConfig.bucket is required")
        object.__setattr__(self, "bucket", bucket)
        object.__setattr__(self, "prefix", self.prefix or "")

    def client_options(self) -> dict[str, Any]:
        """Keyword arguments for ``build_s3_client``."""

        return {
            "endpoint_url": self.endpoint_url,
            "access_key": self.access_key,
            "secret_key": self.secret_key,
            "region": self.region,
            "use_ssl": self.use_ssl,
            "url_style": self.url_style,
            "session_token": self.session_token,
        }

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> AdapterConfig:
        if not isinstance(mapping, Mapping):
            raise ConfigurationError("adapter config must be a mapping")

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        unknown: list[str] = []
        for raw_key, value in mapping.items():
            key = _ALIASES.get(str(raw_key), str(raw_key))
            if key in _PROJECT_KEYS:
                # GCS project ids have no S3 counterpart; buckets are global.
                log_event(logger, "config.ignored_key", level=logging.DEBUG, key=raw_key)
                continue
            if key == "credentials":
                values.update(_credential_fields(value))
                continue
            if key not in known:
                unknown.append(str(raw_key))
                continue
            values[key] = value
        if unknown:
            raise ConfigurationError(f"Unknown adapter config keys: {', '.join(sorted(unknown))}")
        if "bucket" not in values:
            raise ConfigurationError("adapter config must include 'bucket'")

        if "use_ssl" in values and not isinstance(values["use_ssl"], bool):
            values["use_ssl"] = _parse_bool(str(values["use_ssl"]))
        return cls(**values)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> AdapterConfig:
        """Resolve config from ``S3_*`` environment variables (AWS_* credential fallback)."""

        env = env if env is not None else dict(os.environ)
        bucket = env.get("S3_BUCKET_NAME")
        if not bucket:
            raise ConfigurationError("S3_BUCKET_NAME must be set")

        return cls(
            bucket=bucket,
            prefix=env.get("S3_PREFIX") or "",
            url=env.get("S3_PUBLIC_URL") or None,
            endpoint_url=env.get("S3_ENDPOINT_URL") or None,
            access_key=env.get("S3_ACCESS_KEY_ID") or env.get("AWS_ACCESS_KEY_ID") or None,
            secret_key=env.get("S3_SECRET_ACCESS_KEY") or env.get("AWS_SECRET_ACCESS_KEY") or None,
            region=env.get("S3_REGION") or "us-east-1",
            use_ssl=_parse_bool(env.get("S3_USE_SSL")),
            url_style=env.get("S3_URL_STYLE") or "path",
            session_token=env.get("AWS_SESSION_TOKEN") or None,
        )


def _credential_fields(credentials: Any) -> dict[str, Any]:
    """Flatten a ``credentials`` sub-mapping into ``access_key``/``secret_key``/``session_token``."""

    if not isinstance(credentials, Mapping):
        raise ConfigurationError("adapter config 'credentials' must be a mapping")
    resolved: dict[str, Any] = {}
    for raw_key, value in credentials.items():
        key = _ALIASES.get(str(raw_key), str(raw_key))
        if key not in _CREDENTIAL_FIELDS:
            raise ConfigurationError(f"Unknown credential key: {raw_key}")
        resolved[key] = value
    return resolved


def _parse_bool(value: str | None, *, default: bool | None = None) -> bool | None:
    if value is None:
        return default
    text = value.strip().lower()
    if text in {"1", "true", "yes", "y"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    return default


def load_config_file(path: str | Path) -> AdapterConfig:
    """Load an ``AdapterConfig`` from a YAML mapping file."""

    with open(path, encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid adapter config file: {path}")
    return AdapterConfig.from_mapping(data)
