from __future__ import annotations

from dataclasses import dataclass, field

SEPARATOR = "/"


def normalize_prefix(prefix: str | None) -> str:
    """Normalize a root prefix to ``""`` or a value ending in exactly one separator.

    - ``None`` and ``""`` mean the bucket root.
    - Trailing separators collapse: ``a``, ``a/`` and ``a//`` all become ``a/``.
    - A bare ``/`` is kept as ``/``.
    """

    raw = prefix or ""
    value = raw.rstrip(SEPARATOR)
    if value or raw == SEPARATOR:
        value += SEPARATOR
    return value


def strip_leading_separator(path: str) -> str:
    """Remove exactly one leading separator from a logical path."""

    if path.startswith(SEPARATOR):
        return path[1:]
    return path


@dataclass(frozen=True)
class PathPrefixer:
    """Convert logical paths to physical keys under a fixed root prefix and back.

    ``strip_prefix`` is only meaningful for keys that were produced under the same
    prefix (for example keys returned by a prefix-filtered listing); it does not
    validate its input.
    """

    prefix: str = ""
    _normalized: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_normalized", normalize_prefix(self.prefix))

    @property
    def normalized_prefix(self) -> str:
        return self._normalized

    def prefix_path(self, path: str) -> str:
        return self._normalized + strip_leading_separator(path)

    def prefix_directory_path(self, path: str) -> str:
        prefixed = self.prefix_path(path.rstrip(SEPARATOR))
        if not prefixed or prefixed.endswith(SEPARATOR):
            return prefixed
        return prefixed + SEPARATOR

    def strip_prefix(self, key: str) -> str:
        return key[len(self._normalized) :]

    def strip_directory_prefix(self, key: str) -> str:
        return self.strip_prefix(key).rstrip(SEPARATOR)
