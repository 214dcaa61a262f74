from __future__ import annotations

import mimetypes


def detect_mime_type(path: str) -> str | None:
    """Guess a content type from the path's extension; ``None`` when unknown."""

    if not path or path.endswith("/"):
        return None
    mime_type, _ = mimetypes.guess_type(path, strict=False)
    return mime_type
