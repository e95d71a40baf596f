"""Text helpers shared by notification templates."""

from __future__ import annotations

ELLIPSIS = "..."


def truncate_preview(content: str | None, length: int = 100) -> str:
    """Return the first ``length`` characters of ``content``.

    ``...`` is appended only when something was cut off, so the result is at
    most ``length + 3`` characters long.
    """

    text = content or ""
    if len(text) <= length:
        return text
    return f"{text[:length]}{ELLIPSIS}"


__all__ = ["ELLIPSIS", "truncate_preview"]
