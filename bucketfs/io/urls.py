"""Public URL construction for objects in a bucket."""

from __future__ import annotations

from bucketfs.errors import ConfigurationError
from bucketfs.io.uri import join_segments, join_uri

DEFAULT_PUBLIC_ENDPOINT = "https://s3.amazonaws.com"


def build_base_url(
    *,
    bucket: str,
    prefix: str | None = None,
    endpoint_url: str | None = None,
) -> str:
    """Synthesize the public base URL ``<endpoint>/<bucket>/<prefix>`` (path-style).

    Empty pieces are skipped, so an unprefixed adapter yields ``<endpoint>/<bucket>``.
    """

    return join_segments(endpoint_url or DEFAULT_PUBLIC_ENDPOINT, bucket, prefix)


class PublicUrlBuilder:
    """Build public URLs from either an explicit URL prefix or a bucket name.

    ``bucket`` may carry an in-bucket path (``"my-bucket/prefix/in/bucket"``). The
    builder never consults an adapter's key prefix: whatever it is given is the whole
    base, and paths are joined onto it as-is.
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        bucket: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        if url is not None:
            self.url_prefix = url
        elif bucket:
            self.url_prefix = join_segments(endpoint_url or DEFAULT_PUBLIC_ENDPOINT, bucket)
        else:
            raise ConfigurationError("PublicUrlBuilder: neither a bucket nor a url was given")

    def build(self, path: str) -> str:
        return join_uri(self.url_prefix, path)

