"""Path, URL and content-type helpers (no backend access)."""

from bucketfs.io.mime import detect_mime_type
from bucketfs.io.paths import (
    SEPARATOR,
    PathPrefixer,
    normalize_prefix,
    strip_leading_separator,
)
from bucketfs.io.uri import join_segments, join_uri, strip_slashes
from bucketfs.io.urls import DEFAULT_PUBLIC_ENDPOINT, PublicUrlBuilder, build_base_url

__all__ = [
    "DEFAULT_PUBLIC_ENDPOINT",
    "PathPrefixer",
    "PublicUrlBuilder",
    "SEPARATOR",
    "build_base_url",
    "detect_mime_type",
    "join_segments",
    "join_uri",
    "normalize_prefix",
    "strip_leading_separator",
    "strip_slashes",
]
