from __future__ import annotations


def strip_slashes(value: str) -> str:
    return value.strip("/")


def join_uri(base_uri: str, key: str) -> str:
    """Join a base URL and a key with exactly one separator between them."""

    base = base_uri.rstrip("/")
    k = key.lstrip("/")
    return f"{base}/{k}"


def join_segments(*segments: str | None) -> str:
    """Join non-empty segments with ``/``; inner slashes of each segment are kept.

    ``join_segments("https://host/", "bucket", None, "/a/b/")`` -> ``https://host/bucket/a/b``
    """

    parts: list[str] = []
    for index, segment in enumerate(segments):
        if not segment:
            continue
        text = segment.rstrip("/") if index == 0 else strip_slashes(segment)
        if text:
            parts.append(text)
    return "/".join(parts)
