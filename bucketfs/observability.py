from __future__ import annotations

import logging
from collections.abc import Mapping


def _render_fields(fields: Mapping[str, object]) -> str:
    """Render ``k=v`` tokens in call order, skipping ``None`` and blank values."""

    rendered = ((key, "" if value is None else str(value).strip()) for key, value in fields.items())
    return " ".join(f"{key}={text}" for key, text in rendered if text)


def log_event(
    logger: logging.Logger, message: str, *, level: int = logging.INFO, **fields: object
) -> None:
    """Emit a stable, grep-friendly structured log line.

    Fields are rendered as ``k=v`` tokens after the event name; empty values are dropped.
    """

    suffix = _render_fields(fields)
    if suffix:
        logger.log(level, "%s %s", message, suffix)
    else:
        logger.log(level, "%s", message)
